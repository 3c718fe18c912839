#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.
"""

import uvicorn

from interview_booking.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "interview_booking.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
