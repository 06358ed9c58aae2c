"""State of a minutes draft as it moves from audio to saved record.

Every transition returns a new :class:`MinutesDraft`; later results are
cleared whenever an earlier step is redone.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date

from townhall.minutes.models import MeetingMinute, title_from_filename
from townhall.transcription.models import Segment

# User-facing messages shown by the UI
NO_FILE_MESSAGE = "音声ファイルを選択してください。"
NO_TRANSCRIPT_MESSAGE = "文字起こし結果がありません。"
INCOMPLETE_MESSAGE = "保存に必要な情報（文字起こし、議事録、要約、ファイル名）が不足しています。"
TRANSCRIPTION_FAILED_MESSAGE = "文字起こし中にエラーが発生しました。"
MINUTES_FAILED_MESSAGE = "議事録生成中にエラーが発生しました。"
SUMMARY_FAILED_MESSAGE = "要約生成中にエラーが発生しました。"
SAVED_MESSAGE = "議事録を保存しました: {title}"


class DraftIncompleteError(Exception):
    """The draft is missing a field required to save it."""


@dataclass(frozen=True)
class MinutesDraft:
    filename: str | None = None
    segments: tuple[Segment, ...] = field(default_factory=tuple)
    transcript: str | None = None
    minutes: str | None = None
    summary: str | None = None
    error: str | None = None
    notice: str | None = None

    def select_file(self, filename: str) -> MinutesDraft:
        return MinutesDraft(filename=filename)

    def with_transcript(self, segments: list[Segment], transcript: str) -> MinutesDraft:
        return replace(
            self,
            segments=tuple(segments),
            transcript=transcript,
            minutes=None,
            summary=None,
            error=None,
            notice=None,
        )

    def with_minutes(self, minutes: str) -> MinutesDraft:
        return replace(self, minutes=minutes, summary=None, error=None)

    def with_summary(self, summary: str) -> MinutesDraft:
        return replace(self, summary=summary, error=None)

    def with_error(self, message: str) -> MinutesDraft:
        return replace(self, error=message)

    def saved(self, title: str) -> MinutesDraft:
        """Start a fresh draft that still reports the record just saved."""
        return MinutesDraft(notice=SAVED_MESSAGE.format(title=title))

    @property
    def can_save(self) -> bool:
        return bool(self.filename and self.transcript and self.minutes and self.summary)

    def to_record(self, today: date, record_id: str | None = None) -> MeetingMinute:
        """Build the record to persist.

        Raises:
            DraftIncompleteError: If transcript, minutes, summary or file name is missing.
        """
        filename, transcript, minutes, summary = (
            self.filename,
            self.transcript,
            self.minutes,
            self.summary,
        )
        if not (filename and transcript and minutes and summary):
            raise DraftIncompleteError(INCOMPLETE_MESSAGE)
        return MeetingMinute(
            id=record_id or uuid.uuid4().hex,
            title=title_from_filename(filename, today),
            date=today,
            transcription=transcript,
            minutes=minutes,
            summary=summary,
        )
