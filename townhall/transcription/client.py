"""Speech-to-text provider calls returning diarized word tokens."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from townhall.config import settings
from townhall.transcription.models import WordToken
from townhall.transcription.parsers import parse_words

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    """Base class for transcription failures."""


class TranscriptionNotConfiguredError(TranscriptionError):
    """No API key is configured for the selected provider."""


class TranscriptionRejectedError(TranscriptionError):
    """The provider rejected the audio content (corrupted, unsupported format, etc.)."""


class TranscriptionUnavailableError(TranscriptionError):
    """Infrastructure error — invalid API key, network failure, provider outage."""


def _transcribe_elevenlabs(raw: bytes, filename: str) -> list[WordToken]:
    """Transcribe audio bytes via the ElevenLabs Scribe REST API.

    ``diarize=true`` is required for speaker_id on each word; without it
    every token comes back attributed to the same speaker.
    """
    if not settings.elevenlabs_api_key:
        raise TranscriptionNotConfiguredError("ELEVENLABS_API_KEY is not configured")

    try:
        r = httpx.post(
            settings.elevenlabs_api_url,
            headers={"xi-api-key": settings.elevenlabs_api_key},
            files={"file": (filename or "audio", raw)},
            data={"model_id": settings.elevenlabs_model_id, "diarize": "true"},
            timeout=settings.transcription_timeout,
        )
    except httpx.HTTPError as exc:
        raise TranscriptionUnavailableError(f"ElevenLabs request failed: {exc}") from exc

    # 400/422 mean the audio itself was refused; auth errors and 5xx are ours/theirs
    if r.status_code in (400, 422):
        raise TranscriptionRejectedError(f"ElevenLabs rejected the audio: {r.text}")
    if r.status_code >= 400:
        raise TranscriptionUnavailableError(
            f"ElevenLabs returned HTTP {r.status_code}: {r.text}"
        )

    return parse_words(r.json(), "elevenlabs")


def _transcribe_assemblyai(raw: bytes) -> list[WordToken]:
    """Transcribe audio bytes via AssemblyAI SDK.

    The SDK accepts bytes directly — no temp file needed.
    """
    if not settings.assemblyai_api_key:
        raise TranscriptionNotConfiguredError("ASSEMBLYAI_API_KEY is not configured")

    import assemblyai as aai  # type: ignore[import-untyped]  # no stubs; import inside function

    aai.settings.api_key = settings.assemblyai_api_key
    transcriber = aai.Transcriber()
    config = aai.TranscriptionConfig(
        speech_models=list(settings.assemblyai_speech_models),
        speaker_labels=True,
    )

    try:
        transcript = transcriber.transcribe(raw, config=config)
    except Exception as exc:
        raise TranscriptionUnavailableError(f"AssemblyAI request failed: {exc}") from exc

    if transcript.status == aai.TranscriptStatus.error:
        raise TranscriptionRejectedError(f"Transcription failed: {transcript.error}")

    payload: dict[str, Any] = {
        "words": [
            {"speaker": w.speaker, "text": w.text, "start": w.start, "end": w.end}
            for w in transcript.words or []
        ]
    }
    return parse_words(payload, "assemblyai")


def transcribe_audio(raw: bytes, filename: str = "") -> list[WordToken]:
    """Transcribe *raw* audio with the configured provider.

    Args:
        raw: Audio file bytes.
        filename: Original upload filename (forwarded to providers that use it).

    Returns:
        Diarized word tokens in chronological order.

    Raises:
        TranscriptionNotConfiguredError: No API key for the provider.
        TranscriptionRejectedError: The provider refused the audio.
        TranscriptionUnavailableError: Network, auth or provider outage.
        ValueError: Unknown ``transcription_provider`` setting.
    """
    provider = settings.transcription_provider
    logger.info("Transcribing %s (%d bytes) with %s", filename or "<upload>", len(raw), provider)

    if provider == "elevenlabs":
        words = _transcribe_elevenlabs(raw, filename)
    elif provider == "assemblyai":
        words = _transcribe_assemblyai(raw)
    else:
        msg = f"Unknown transcription provider: {provider!r}"
        raise ValueError(msg)

    logger.info("Received %d word tokens from %s", len(words), provider)
    return words
