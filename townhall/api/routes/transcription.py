"""Transcription endpoints: audio upload and word-stream segmentation."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, File, HTTPException, UploadFile

from townhall.api.models import SegmentModel, SegmentRequest, TranscriptionResponse
from townhall.config import settings
from townhall.transcription.client import (
    TranscriptionNotConfiguredError,
    TranscriptionRejectedError,
    TranscriptionUnavailableError,
    transcribe_audio,
)
from townhall.transcription.models import WordToken
from townhall.transcription.parsers import parse_words
from townhall.transcription.segmenter import flatten_segments, format_timeline, segment_words

logger = logging.getLogger(__name__)

router = APIRouter()

# 50 MB upload limit
MAX_UPLOAD_BYTES = 50 * 1024 * 1024


def _build_response(words: list[WordToken]) -> TranscriptionResponse:
    segments = segment_words(words)
    label = settings.unknown_speaker_label
    return TranscriptionResponse(
        segments=[SegmentModel.from_segment(s) for s in segments],
        timeline=format_timeline(segments, unknown_label=label),
        transcript=flatten_segments(segments, unknown_label=label),
        num_speakers=len({s.speaker_id for s in segments if s.speaker_id}),
    )


@router.post("/api/transcriptions", response_model=TranscriptionResponse)
async def transcribe(file: Annotated[UploadFile, File(...)]) -> TranscriptionResponse:
    """Upload a meeting recording, transcribe it and return speaker turns.

    - 413 if the upload exceeds the size limit.
    - 501 if the transcription provider has no API key configured.
    - 400 if the provider rejects the audio; 503 on provider/network failure.
    """
    raw = await file.read()
    if len(raw) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB.",
        )
    if not raw:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    # Run the synchronous provider call in a thread — avoids blocking the event loop.
    try:
        words = await asyncio.to_thread(transcribe_audio, raw, file.filename or "")
    except TranscriptionNotConfiguredError as exc:
        raise HTTPException(
            status_code=501,
            detail=f"Audio transcription is not configured: {exc}",
        ) from exc
    except TranscriptionRejectedError as exc:
        logger.warning("Transcription rejected for %s: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except TranscriptionUnavailableError as exc:
        logger.exception("Transcription service failed for %s", file.filename)
        raise HTTPException(
            status_code=503,
            detail=f"Transcription service unavailable: {exc}",
        ) from exc

    return _build_response(words)


@router.post("/api/transcriptions/segment", response_model=TranscriptionResponse)
async def segment(request: SegmentRequest) -> TranscriptionResponse:
    """Group an already-diarized word list into speaker turns."""
    words = [
        WordToken(speaker_id=w.speaker_id, text=w.text, start=w.start, end=w.end)
        for w in request.words
    ]
    return _build_response(words)


@router.post("/api/transcriptions/import", response_model=TranscriptionResponse)
async def import_words(
    payload: Annotated[dict[str, Any], Body(...)],
    format: str = "json",
) -> TranscriptionResponse:
    """Segment a saved word-level payload.

    *format* selects the parser: ``elevenlabs``, ``assemblyai`` or ``json``.
    Returns 422 for an unknown format or a payload without usable words.
    """
    try:
        words = parse_words(payload, format)
    except (KeyError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=f"Cannot import words: {exc}") from exc
    return _build_response(words)
