"""Word-timed captions: timing index, styles and the caption workflow.

The workflow itself lives in :mod:`motion_studio.captions.pipeline` and is
imported from there; this package only re-exports the pure parts.
"""

from .styles import (
    BUILTIN_STYLES,
    CaptionStyle,
    FrameCaption,
    StyleRegistry,
    default_registry,
    describe_frame,
)
from .timing import (
    TimestampedWord,
    WordGroup,
    composition_duration_frames,
    find_active_group,
    find_current_active_word,
    group_window,
    group_words,
    is_word_active,
    to_frame,
)

__all__ = [
    "BUILTIN_STYLES",
    "CaptionStyle",
    "FrameCaption",
    "StyleRegistry",
    "TimestampedWord",
    "WordGroup",
    "composition_duration_frames",
    "default_registry",
    "describe_frame",
    "find_active_group",
    "find_current_active_word",
    "group_window",
    "group_words",
    "is_word_active",
    "to_frame",
]
