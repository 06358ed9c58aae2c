"""Annual schedule endpoints."""

from __future__ import annotations

import datetime
import logging

from fastapi import APIRouter, HTTPException, Response

from townhall.api.models import ScheduleItemModel, ScheduleItemRequest
from townhall.errors import ValidationError
from townhall.schedule.models import build_item, event_days, items_for_date
from townhall.storage.repository import get_schedule_repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/schedule", response_model=list[ScheduleItemModel])
async def list_schedule(date: datetime.date | None = None) -> list[ScheduleItemModel]:
    """List schedule items in date order, or only those on *date*."""
    items = get_schedule_repository().list()
    if date is not None:
        items = items_for_date(items, date)
    return [ScheduleItemModel.from_item(i) for i in items]


@router.get("/api/schedule/days", response_model=list[datetime.date])
async def list_event_days() -> list[datetime.date]:
    """Days with at least one event, ascending, for marking the calendar."""
    return event_days(get_schedule_repository().list())


@router.post("/api/schedule", response_model=ScheduleItemModel, status_code=201)
async def create_schedule_item(request: ScheduleItemRequest) -> ScheduleItemModel:
    try:
        item = build_item(request.title, request.date, request.description)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    get_schedule_repository().save(item)
    logger.info("Added schedule item %s on %s", item.title, item.date)
    return ScheduleItemModel.from_item(item)


@router.put("/api/schedule/{item_id}", response_model=ScheduleItemModel)
async def update_schedule_item(item_id: str, request: ScheduleItemRequest) -> ScheduleItemModel:
    repo = get_schedule_repository()
    if repo.get(item_id) is None:
        raise HTTPException(status_code=404, detail="Schedule item not found")
    try:
        item = build_item(request.title, request.date, request.description, item_id=item_id)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    repo.save(item)
    return ScheduleItemModel.from_item(item)


@router.delete("/api/schedule/{item_id}", status_code=204)
async def delete_schedule_item(item_id: str) -> Response:
    if not get_schedule_repository().delete(item_id):
        raise HTTPException(status_code=404, detail="Schedule item not found")
    return Response(status_code=204)
