"""Parsers turning word-level provider payloads into word tokens."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from townhall.transcription.models import WordToken


def _load_words(content: str | dict[str, Any]) -> list[dict[str, Any]]:
    data = json.loads(content) if isinstance(content, str) else content
    if not isinstance(data, dict) or "words" not in data:
        keys = list(data.keys()) if isinstance(data, dict) else type(data).__name__
        msg = f"Unrecognized word-level transcript payload. Keys: {keys}"
        raise ValueError(msg)
    words = data["words"] or []
    return list(words)


def parse_elevenlabs(
    content: str | dict[str, Any],
    include_audio_events: bool = False,
) -> list[WordToken]:
    """Parse an ElevenLabs Scribe response (times in seconds).

    Scribe returns ``word``, ``spacing`` and ``audio_event`` entries::

        {"language_code": "jpn", "text": "...",
         "words": [{"text": "Hi", "start": 0.0, "end": 0.4,
                    "type": "word", "speaker_id": "speaker_0"}, ...]}

    Spacing entries are kept because they carry the whitespace between
    words. Audio events (``(laughter)``) are dropped unless requested.
    """
    tokens: list[WordToken] = []
    for word in _load_words(content):
        if word.get("type") == "audio_event" and not include_audio_events:
            continue
        tokens.append(
            WordToken(
                speaker_id=word.get("speaker_id"),
                text=word.get("text", ""),
                start=word.get("start", 0.0),
                end=word.get("end", 0.0),
            )
        )
    return tokens


def parse_assemblyai(content: str | dict[str, Any]) -> list[WordToken]:
    """Parse AssemblyAI word timings (times in milliseconds).

    AssemblyAI words carry no spacing, so a single space is appended to every
    token except the last.
    """
    words = _load_words(content)
    tokens: list[WordToken] = []
    for i, word in enumerate(words):
        text = word.get("text", "")
        if i < len(words) - 1:
            text += " "
        tokens.append(
            WordToken(
                speaker_id=word.get("speaker"),
                text=text,
                start=word.get("start", 0) / 1000.0,
                end=word.get("end", 0) / 1000.0,
            )
        )
    return tokens


def parse_internal(content: str | dict[str, Any]) -> list[WordToken]:
    """Parse the internal ``{"words": [{speaker_id, text, start, end}]}`` format."""
    return [
        WordToken(
            speaker_id=word.get("speaker_id"),
            text=word["text"],
            start=word["start"],
            end=word["end"],
        )
        for word in _load_words(content)
    ]


def parse_words(content: str | dict[str, Any], format: str) -> list[WordToken]:
    """Dispatch to the correct word parser based on *format*.

    Args:
        content: Raw JSON text or an already-decoded payload.
        format: One of ``"elevenlabs"``, ``"assemblyai"`` or ``"json"``.

    Returns:
        Word tokens in provider order.

    Raises:
        ValueError: If *format* is not recognized or the payload has no words.
    """
    dispatch: dict[str, Callable[[str | dict[str, Any]], list[WordToken]]] = {
        "elevenlabs": parse_elevenlabs,
        "assemblyai": parse_assemblyai,
        "json": parse_internal,
    }

    parser = dispatch.get(format)
    if parser is None:
        msg = f"Unknown word format: {format!r}. Supported: {list(dispatch.keys())}"
        raise ValueError(msg)

    return parser(content)
