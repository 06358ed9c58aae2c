"""Row mappers between domain dataclasses and Supabase table rows."""

from __future__ import annotations

from datetime import date
from typing import Any

from townhall.minutes.models import MeetingMinute
from townhall.schedule.models import ScheduleItem
from townhall.workflows.models import Workflow, WorkflowFile


def minute_to_row(minute: MeetingMinute) -> dict[str, Any]:
    return {
        "id": minute.id,
        "title": minute.title,
        "date": minute.date.isoformat(),
        "transcription": minute.transcription,
        "minutes": minute.minutes,
        "summary": minute.summary,
    }


def minute_from_row(row: dict[str, Any]) -> MeetingMinute:
    return MeetingMinute(
        id=str(row["id"]),
        title=row["title"],
        date=date.fromisoformat(row["date"]),
        transcription=row.get("transcription") or "",
        minutes=row.get("minutes") or "",
        summary=row.get("summary") or "",
    )


def schedule_to_row(item: ScheduleItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "date": item.date.isoformat(),
        "title": item.title,
        "description": item.description,
    }


def schedule_from_row(row: dict[str, Any]) -> ScheduleItem:
    return ScheduleItem(
        id=str(row["id"]),
        date=date.fromisoformat(row["date"]),
        title=row["title"],
        description=row.get("description"),
    )


def workflow_to_row(workflow: Workflow) -> dict[str, Any]:
    # files live in a jsonb column
    return {
        "id": workflow.id,
        "name": workflow.name,
        "mermaid_code": workflow.mermaid_code,
        "description": workflow.description,
        "files": [{"id": f.id, "name": f.name, "url": f.url} for f in workflow.files],
    }


def workflow_from_row(row: dict[str, Any]) -> Workflow:
    return Workflow(
        id=str(row["id"]),
        name=row["name"],
        mermaid_code=row["mermaid_code"],
        description=row.get("description"),
        files=[
            WorkflowFile(id=str(f["id"]), name=f["name"], url=f.get("url"))
            for f in row.get("files") or []
        ],
    )
