# backend/interview_booking/routes/templates.py
"""Template administration routes."""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..api.dependencies import get_template_service
from ..core.exceptions import DomainException
from ..schemas.template import TemplateCreate, TemplateResponse, TemplateUpdate
from ..services.template_service import TemplateService
from .utils import handle_domain_exception

router = APIRouter(prefix="/api/templates", tags=["templates"])


def _values(payload) -> dict:
    values = payload.model_dump(exclude_unset=True)
    if "weekly_schedule" in values and values["weekly_schedule"] is not None:
        values["weekly_schedule"] = payload.model_dump(by_alias=True, include={"weekly_schedule"})[
            "weeklySchedule"
        ]
    return values


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: TemplateCreate,
    template_service: TemplateService = Depends(get_template_service),
):
    try:
        return await asyncio.to_thread(template_service.create_template, _values(payload))
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[TemplateResponse])
async def list_templates(template_service: TemplateService = Depends(get_template_service)):
    return await asyncio.to_thread(template_service.list_templates)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: str,
    template_service: TemplateService = Depends(get_template_service),
):
    try:
        return await asyncio.to_thread(template_service.get_template, template_id)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: str,
    payload: TemplateUpdate,
    template_service: TemplateService = Depends(get_template_service),
):
    try:
        return await asyncio.to_thread(
            template_service.update_template, template_id, _values(payload)
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    template_service: TemplateService = Depends(get_template_service),
):
    try:
        await asyncio.to_thread(template_service.delete_template, template_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)
