"""Data models for saved meeting minutes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass
class MeetingMinute:
    """A saved set of minutes with its source transcript and summary."""

    id: str
    title: str
    date: date
    transcription: str
    minutes: str
    summary: str

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match over the searchable fields."""
        needle = term.lower()
        return any(
            needle in field.lower()
            for field in (self.title, self.minutes, self.transcription, self.summary)
        )


def title_from_filename(filename: str, today: date) -> str:
    """Derive a minutes title from an audio file name.

    Strips the extension; falls back to ``議事録 YYYY/MM/DD`` when nothing is left.
    """
    stem = filename.rsplit("/", 1)[-1]
    if "." in stem:
        stem = stem.rsplit(".", 1)[0]
    return stem or f"議事録 {today:%Y/%m/%d}"
