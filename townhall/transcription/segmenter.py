"""Speaker-turn segmentation of a diarized word stream."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from townhall.transcription.models import Segment, WordToken


def segment_words(words: Iterable[WordToken]) -> list[Segment]:
    """Group consecutive tokens by speaker into ordered segments.

    A new segment starts whenever the speaker differs from the previous
    token's speaker (plain equality, so consecutive ``None`` speakers merge).
    The input is assumed to be in chronological order and is never sorted.

    Each segment's ``text`` is the in-order concatenation of its token texts
    (no separator is added), ``start`` is the smallest token start and
    ``end`` the largest token end. Malformed bounds pass through unchanged.

    Args:
        words: Diarized tokens in the order the provider returned them.

    Returns:
        List of :class:`Segment` instances, one per maximal speaker run.
    """
    # Group consecutive tokens by speaker
    groups: list[tuple[str | None, list[WordToken]]] = []
    for word in words:
        if groups and groups[-1][0] == word.speaker_id:
            groups[-1][1].append(word)
        else:
            groups.append((word.speaker_id, [word]))

    # Every group holds at least one token, so min/max never see an empty run
    return [
        Segment(
            speaker_id=speaker_id,
            text="".join(w.text for w in run),
            start=min(w.start for w in run),
            end=max(w.end for w in run),
            words=tuple(run),
        )
        for speaker_id, run in groups
    ]


def flatten_segments(segments: Sequence[Segment], unknown_label: str | None = None) -> str:
    """Render segments as ``"speaker: text"`` lines for prompt input.

    If *unknown_label* is given it replaces an absent speaker; otherwise the
    absent value is rendered as-is.
    """
    lines: list[str] = []
    for seg in segments:
        speaker = seg.speaker_id
        if speaker is None and unknown_label is not None:
            speaker = unknown_label
        lines.append(f"{speaker}: {seg.text}")
    return "\n".join(lines)


def format_timestamp(seconds: float) -> str:
    """Format seconds as zero-padded ``MM:SS``.

    Non-finite values render as ``--:--`` and negative values clamp to zero.
    """
    if not math.isfinite(seconds):
        return "--:--"
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_timeline(segments: Sequence[Segment], unknown_label: str = "Unknown") -> list[str]:
    """Render one ``[MM:SS–MM:SS] speaker: text`` row per segment."""
    return [
        f"[{format_timestamp(seg.start)}–{format_timestamp(seg.end)}] "
        f"{seg.speaker_id if seg.speaker_id is not None else unknown_label}: {seg.text}"
        for seg in segments
    ]
