"""Pydantic request/response schemas for the workspace API."""

from __future__ import annotations

import datetime

from pydantic import BaseModel

from townhall.minutes.models import MeetingMinute
from townhall.schedule.models import ScheduleItem
from townhall.transcription.models import Segment
from townhall.workflows.models import Workflow


class WordTokenModel(BaseModel):
    """A single diarized word token."""

    speaker_id: str | None = None
    text: str
    start: float
    end: float


class SegmentRequest(BaseModel):
    """Request body for /api/transcriptions/segment."""

    words: list[WordTokenModel]


class SegmentModel(BaseModel):
    """A speaker turn with its constituent words."""

    speaker_id: str | None = None
    text: str
    start: float
    end: float
    words: list[WordTokenModel] = []

    @classmethod
    def from_segment(cls, seg: Segment) -> SegmentModel:
        return cls(
            speaker_id=seg.speaker_id,
            text=seg.text,
            start=seg.start,
            end=seg.end,
            words=[
                WordTokenModel(speaker_id=w.speaker_id, text=w.text, start=w.start, end=w.end)
                for w in seg.words
            ],
        )


class TranscriptionResponse(BaseModel):
    """Segments plus the two rendered views: UI timeline and prompt transcript."""

    segments: list[SegmentModel]
    timeline: list[str]
    transcript: str
    num_speakers: int


class TranscriptRequest(BaseModel):
    """Request body for the minutes/summary generation endpoints."""

    transcript: str


class MinutesResponse(BaseModel):
    minutes: str


class SummaryResponse(BaseModel):
    summary: str


class MinuteCreate(BaseModel):
    """Request body for saving minutes."""

    title: str | None = None
    filename: str | None = None
    date: datetime.date | None = None
    transcription: str
    minutes: str
    summary: str


class MinuteModel(BaseModel):
    id: str
    title: str
    date: datetime.date
    transcription: str
    minutes: str
    summary: str

    @classmethod
    def from_minute(cls, minute: MeetingMinute) -> MinuteModel:
        return cls(
            id=minute.id,
            title=minute.title,
            date=minute.date,
            transcription=minute.transcription,
            minutes=minute.minutes,
            summary=minute.summary,
        )


class ScheduleItemRequest(BaseModel):
    """Request body for creating or updating a schedule item."""

    date: datetime.date
    title: str
    description: str | None = None


class ScheduleItemModel(BaseModel):
    id: str
    date: datetime.date
    title: str
    description: str | None = None

    @classmethod
    def from_item(cls, item: ScheduleItem) -> ScheduleItemModel:
        return cls(id=item.id, date=item.date, title=item.title, description=item.description)


class WorkflowFileModel(BaseModel):
    id: str
    name: str
    url: str | None = None


class WorkflowRequest(BaseModel):
    """Request body for creating or updating a workflow."""

    name: str
    mermaid_code: str | None = None
    description: str | None = None


class WorkflowFileRequest(BaseModel):
    name: str
    url: str | None = None


class WorkflowModel(BaseModel):
    id: str
    name: str
    mermaid_code: str
    description: str | None = None
    files: list[WorkflowFileModel] = []

    @classmethod
    def from_workflow(cls, workflow: Workflow) -> WorkflowModel:
        return cls(
            id=workflow.id,
            name=workflow.name,
            mermaid_code=workflow.mermaid_code,
            description=workflow.description,
            files=[WorkflowFileModel(id=f.id, name=f.name, url=f.url) for f in workflow.files],
        )
