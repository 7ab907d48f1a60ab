"""
Frame-accurate timing for word-level captions.

Converts a sorted list of timestamped words into display groups and answers
"what is on screen at frame F" queries. Everything here is pure; the same
rules are mirrored by the JSX composition so that a Python preview and the
rendered video agree frame by frame.

Preconditions (not checked): words are sorted by ``start``, every
``end >= start`` and no time is negative. Groups passed to the query helpers
are non-empty.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence


@dataclass(frozen=True)
class TimestampedWord:
    """A transcribed word with start/end times in seconds."""

    word: str
    start: float
    end: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimestampedWord":
        """Build a word from a ``{word, start, end}`` mapping."""
        return cls(word=str(data["word"]), start=float(data["start"]), end=float(data["end"]))

    def to_dict(self) -> dict[str, Any]:
        return {"word": self.word, "start": self.start, "end": self.end}


WordGroup = tuple[TimestampedWord, ...]


def to_frame(seconds: float, fps: int) -> int:
    """Convert seconds to a frame index.

    Rounds half up (``floor(x + 0.5)``), the same as JavaScript's
    ``Math.round`` for the non-negative values used here. Python's built-in
    ``round`` rounds half to even and would disagree with the renderer on
    exact half frames.
    """
    return math.floor(seconds * fps + 0.5)


def group_words(words: Sequence[TimestampedWord], target_size: int) -> list[WordGroup]:
    """Split words into consecutive display groups.

    Takes ``target_size`` words at a time while at least
    ``2 * target_size + 1`` remain. When fewer remain but still more than
    ``target_size``, the next group takes ``target_size + 1`` so that a lone
    trailing word is absorbed instead of flashing up on its own. The last
    group takes whatever is left.

    Args:
        words: Words sorted by start time.
        target_size: Preferred number of words per group (>= 1).

    Returns:
        Groups that together contain every word exactly once, in order.
    """
    if target_size < 1:
        raise ValueError(f"target_size must be >= 1, got {target_size}")

    groups: list[WordGroup] = []
    i = 0
    while i < len(words):
        remaining = len(words) - i
        if remaining >= 2 * target_size + 1:
            take = target_size
        elif remaining >= target_size + 1:
            take = target_size + 1
        else:
            take = remaining
        groups.append(tuple(words[i : i + take]))
        i += take
    return groups


def group_window(group: WordGroup, fps: int) -> tuple[int, int]:
    """Inclusive (start_frame, end_frame) of a group."""
    return to_frame(group[0].start, fps), to_frame(group[-1].end, fps)


def find_active_group(groups: Iterable[WordGroup], frame: int, fps: int) -> Optional[WordGroup]:
    """Return the first group whose inclusive frame window contains ``frame``."""
    for group in groups:
        start, end = group_window(group, fps)
        if start <= frame <= end:
            return group
    return None


def is_word_active(word: TimestampedWord, frame: int, fps: int) -> bool:
    """True if ``frame`` lies within the word's inclusive frame window."""
    return to_frame(word.start, fps) <= frame <= to_frame(word.end, fps)


def find_current_active_word(group: WordGroup, frame: int, fps: int) -> Optional[TimestampedWord]:
    """Return the most recently started word of ``group`` at ``frame``.

    Unlike :func:`is_word_active` this ignores word end times: between two
    words the previous one stays current until the next one starts.
    """
    current = None
    for word in group:
        if to_frame(word.start, fps) <= frame:
            current = word
    return current


def composition_duration_frames(
    words: Sequence[TimestampedWord], fps: int, tail_padding: float = 0.5
) -> int:
    """Frames needed to show every word, plus a short tail after the last one."""
    if not words:
        return 0
    return math.ceil((words[-1].end + tail_padding) * fps)
