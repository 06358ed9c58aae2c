"""Minutes endpoints: AI generation, saving, search and deletion."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import date

from anthropic import APIStatusError
from fastapi import APIRouter, HTTPException, Response

from townhall.api.models import (
    MinuteCreate,
    MinuteModel,
    MinutesResponse,
    SummaryResponse,
    TranscriptRequest,
)
from townhall.minutes.generation import (
    GenerationNotConfiguredError,
    generate_minutes,
    summarize_minutes,
)
from townhall.minutes.session import NO_TRANSCRIPT_MESSAGE, DraftIncompleteError, MinutesDraft
from townhall.storage.repository import get_minutes_repository

logger = logging.getLogger(__name__)

router = APIRouter()


async def _run_flow(flow_name: str, flow: Callable[[str], str], transcript: str) -> str:
    """Run a blocking generation flow in a thread and map its failures to HTTP errors."""
    if not transcript.strip():
        raise HTTPException(status_code=400, detail=NO_TRANSCRIPT_MESSAGE)
    try:
        return str(await asyncio.to_thread(flow, transcript))
    except GenerationNotConfiguredError as exc:
        raise HTTPException(
            status_code=501,
            detail=f"Minutes generation is not configured: {exc}",
        ) from exc
    except APIStatusError as exc:
        # Claude API overloaded (529) or other upstream error — 503, not the client's fault.
        logger.exception("%s failed", flow_name)
        raise HTTPException(status_code=503, detail=f"LLM unavailable: {exc.message}") from exc


@router.post("/api/minutes/generate", response_model=MinutesResponse)
async def generate(request: TranscriptRequest) -> MinutesResponse:
    """Generate Markdown minutes from a ``speaker: text`` transcript."""
    minutes = await _run_flow("Minutes generation", generate_minutes, request.transcript)
    return MinutesResponse(minutes=minutes)


@router.post("/api/minutes/summarize", response_model=SummaryResponse)
async def summarize(request: TranscriptRequest) -> SummaryResponse:
    """Summarize key decisions and action items from a transcript."""
    summary = await _run_flow("Summary generation", summarize_minutes, request.transcript)
    return SummaryResponse(summary=summary)


@router.get("/api/minutes", response_model=list[MinuteModel])
async def list_minutes(q: str | None = None) -> list[MinuteModel]:
    """List saved minutes (newest first), optionally filtered by a search term."""
    minutes = get_minutes_repository().list()
    if q:
        minutes = [m for m in minutes if m.matches(q)]
    return [MinuteModel.from_minute(m) for m in minutes]


@router.post("/api/minutes", response_model=MinuteModel, status_code=201)
async def save_minutes(request: MinuteCreate) -> MinuteModel:
    """Save a completed draft.

    The title defaults to the audio file name without its extension.
    """
    draft = (
        MinutesDraft()
        .select_file(request.filename or request.title or "")
        .with_transcript([], request.transcription)
        .with_minutes(request.minutes)
        .with_summary(request.summary)
    )
    try:
        record = draft.to_record(request.date or date.today())
    except DraftIncompleteError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if request.title:
        record.title = request.title

    get_minutes_repository().save(record)
    logger.info("Saved minutes %s (%s)", record.id, record.title)
    return MinuteModel.from_minute(record)


@router.get("/api/minutes/{minute_id}", response_model=MinuteModel)
async def get_minutes(minute_id: str) -> MinuteModel:
    minute = get_minutes_repository().get(minute_id)
    if minute is None:
        raise HTTPException(status_code=404, detail="Minutes not found")
    return MinuteModel.from_minute(minute)


@router.delete("/api/minutes/{minute_id}", status_code=204)
async def delete_minutes(minute_id: str) -> Response:
    if not get_minutes_repository().delete(minute_id):
        raise HTTPException(status_code=404, detail="Minutes not found")
    return Response(status_code=204)
