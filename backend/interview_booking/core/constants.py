"""Application-wide constants for the booking engine."""

# Slot and link rules
DEFAULT_SLOT_DURATION = 30  # minutes
ALLOWED_LINK_DURATIONS = frozenset({30})
ADVANCE_HOURS_OPTIONS = frozenset({6, 12, 24, 48})

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Input formats
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"
SLUG_PATTERN = r"^[a-z0-9-]+$"
MIN_SLUG_LENGTH = 3
MAX_SLUG_LENGTH = 50

# Text constraints
MAX_NAME_LENGTH = 100
MAX_NOTES_LENGTH = 1000
MAX_REASON_LENGTH = 500

# Cache bookkeeping
CACHE_VERSION = 1
