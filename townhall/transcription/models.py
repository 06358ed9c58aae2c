"""Data models for diarized transcripts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WordToken:
    """A single diarized token from the speech-to-text provider.

    ``text`` keeps whatever spacing the provider attached to the token.
    ``end >= start`` is expected from upstream but never relied upon.
    """

    speaker_id: str | None
    text: str
    start: float
    end: float


@dataclass(frozen=True)
class Segment:
    """A contiguous speaker turn built from consecutive tokens."""

    speaker_id: str | None
    text: str
    start: float
    end: float
    words: tuple[WordToken, ...]
