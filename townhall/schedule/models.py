"""Annual schedule items and date lookups."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from townhall.errors import ValidationError


@dataclass
class ScheduleItem:
    """A single event on the association's annual calendar."""

    id: str
    date: date
    title: str
    description: str | None = None


def build_item(
    title: str,
    day: date,
    description: str | None = None,
    item_id: str | None = None,
) -> ScheduleItem:
    """Create (or rebuild, when *item_id* is given) a validated schedule item.

    The title is trimmed and required; a blank description becomes ``None``.
    """
    title = title.strip()
    if not title:
        raise ValidationError("タイトルは必須です。")
    return ScheduleItem(
        id=item_id or uuid.uuid4().hex,
        date=day,
        title=title,
        description=(description or "").strip() or None,
    )


def items_for_date(items: Iterable[ScheduleItem], day: date) -> list[ScheduleItem]:
    return [item for item in items if item.date == day]


def event_days(items: Iterable[ScheduleItem]) -> list[date]:
    """Distinct days that have at least one event, in ascending order."""
    return sorted({item.date for item in items})
