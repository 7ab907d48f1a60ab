"""
Caption styles as data.

Every caption look is a :class:`CaptionStyle` value: typography, colours and
the few timing knobs that actually differ between looks (group size, which
word gets highlighted, entrance/exit fades, single-word pop). One renderer,
:func:`describe_frame`, turns a style plus the transcript into what should be
on screen at a given frame. The JSX composition receives the same style as
props (``CaptionStyle.to_props``) and applies identical rules.
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Literal, Mapping, Optional, Sequence

from .timing import (
    TimestampedWord,
    find_active_group,
    find_current_active_word,
    group_words,
    is_word_active,
    to_frame,
)

HighlightMode = Literal["active", "current", "none"]
Position = Literal["bottom", "center"]

EMOJI_VISIBLE_FRAMES = 60
EMOJI_POSITIONS = (25, 50, 75)


@dataclass(frozen=True)
class CaptionStyle:
    """Parameters of one caption look.

    ``group_size == 0`` means single-word mode: only the word being spoken is
    shown, popping in over ``pop_frames``.
    """

    id: str
    group_size: int = 4
    highlight: HighlightMode = "active"
    position: Position = "bottom"
    font_family: str = "system-ui, sans-serif"
    font_weight: int = 800
    font_size: int = 72
    color: str = "#FFFFFF"
    active_color: str | None = None
    active_font_family: str | None = None
    active_font_size: int | None = None
    glow: str | None = None
    stroke: str | None = None
    text_shadow: str = "2px 2px 8px rgba(0,0,0,0.7)"
    letter_spacing: str | None = None
    gap: int = 16
    uppercase: bool = False
    fade_in_frames: int = 6
    fade_out_frames: int = 0
    pop_frames: int = 0
    pop_from_scale: float = 0.7
    emoji: bool = False

    @property
    def single_word(self) -> bool:
        return self.group_size == 0

    def to_props(self) -> dict[str, Any]:
        """Style as camelCase props for the caption composition."""
        data = asdict(self)
        return {_camel(key): value for key, value in data.items()}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass
class CaptionWord:
    """A word as drawn on one frame."""

    text: str
    highlighted: bool


@dataclass
class EmojiOverlay:
    """An emoji clip visible on one frame."""

    url: str
    left_percent: int
    scale: float


@dataclass
class FrameCaption:
    """Everything a style draws on one frame."""

    style_id: str
    position: Position
    words: list[CaptionWord] = field(default_factory=list)
    opacity: float = 1.0
    scale: float = 1.0
    emojis: list[EmojiOverlay] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(w.text for w in self.words)

    @property
    def highlighted(self) -> list[str]:
        return [w.text for w in self.words if w.highlighted]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _ramp(frame: int, start: int, length: int) -> float:
    """Linear 0..1 ramp starting at ``start``, clamped on both ends."""
    if length <= 0:
        return 1.0
    return min(max((frame - start) / length, 0.0), 1.0)


def describe_frame(
    style: CaptionStyle,
    words: Sequence[TimestampedWord],
    frame: int,
    fps: int,
    extra: Optional[Mapping[str, Any]] = None,
) -> Optional[FrameCaption]:
    """Describe what ``style`` draws at ``frame``.

    Args:
        style: The caption style.
        words: Transcript words sorted by start time.
        frame: Output frame index.
        fps: Output frame rate.
        extra: Optional style inputs; ``emoji_cues`` is a list of
            ``{"startFrame": int, "emojiUrl": str}`` used by emoji styles.

    Returns:
        The frame description, or None when nothing is on screen.
    """
    emojis = _emoji_overlays(style, frame, (extra or {}).get("emoji_cues") or [])

    if style.single_word:
        active = next((w for w in words if is_word_active(w, frame, fps)), None)
        if active is None:
            return FrameCaption(style.id, style.position, emojis=emojis) if emojis else None
        progress = _ramp(frame, to_frame(active.start, fps), style.pop_frames)
        scale = style.pop_from_scale + (1.0 - style.pop_from_scale) * progress
        return FrameCaption(
            style_id=style.id,
            position=style.position,
            words=[CaptionWord(_cased(style, active.word), True)],
            scale=scale if style.pop_frames else 1.0,
            emojis=emojis,
        )

    group = find_active_group(group_words(words, style.group_size), frame, fps)
    if group is None:
        return FrameCaption(style.id, style.position, emojis=emojis) if emojis else None

    group_start = to_frame(group[0].start, fps)
    group_end = to_frame(group[-1].end, fps)
    fade_in = _ramp(frame, group_start, style.fade_in_frames)
    fade_out = 1.0
    if style.fade_out_frames:
        fade_out -= _ramp(frame, group_end - style.fade_out_frames, style.fade_out_frames)

    current = find_current_active_word(group, frame, fps) if style.highlight == "current" else None
    drawn = []
    for word in group:
        if style.highlight == "active":
            highlighted = is_word_active(word, frame, fps)
        elif style.highlight == "current":
            highlighted = word is current
        else:
            highlighted = False
        drawn.append(CaptionWord(_cased(style, word.word), highlighted))

    return FrameCaption(
        style_id=style.id,
        position=style.position,
        words=drawn,
        opacity=fade_in * fade_out,
        emojis=emojis,
    )


def _cased(style: CaptionStyle, text: str) -> str:
    return text.upper() if style.uppercase else text


def _emoji_overlays(style: CaptionStyle, frame: int, cues: Sequence[Mapping[str, Any]]) -> list[EmojiOverlay]:
    if not style.emoji:
        return []
    overlays = []
    for cue in cues:
        start = int(cue["startFrame"])
        if start <= frame <= start + EMOJI_VISIBLE_FRAMES:
            left = EMOJI_POSITIONS[len(overlays) % len(EMOJI_POSITIONS)]
            overlays.append(EmojiOverlay(str(cue["emojiUrl"]), left, _ramp(frame, start, 10)))
    return overlays


class StyleRegistry:
    """Maps style ids to caption styles."""

    def __init__(self, styles: Sequence[CaptionStyle] = (), default: str | None = None):
        self._styles: dict[str, CaptionStyle] = {}
        for style in styles:
            self.register(style)
        self.default = default or (styles[0].id if styles else None)

    def register(self, style: CaptionStyle) -> None:
        self._styles[style.id] = style

    def __contains__(self, style_id: object) -> bool:
        return style_id in self._styles

    def ids(self) -> list[str]:
        return sorted(self._styles)

    def get(self, style_id: str | None) -> CaptionStyle:
        """Look up a style, falling back to the default for unknown ids."""
        if style_id in self._styles:
            return self._styles[style_id]
        if self.default is None:
            raise KeyError(f"Unknown caption style: {style_id}")
        return self._styles[self.default]


_HEAT_GLOW = CaptionStyle(
    id="heat-glow",
    active_color="#FF3B30",
    glow="#FF3B30",
)

BUILTIN_STYLES: tuple[CaptionStyle, ...] = (
    _HEAT_GLOW,
    replace(_HEAT_GLOW, id="heat", active_color="#FF9500", glow="#FF9500", uppercase=True),
    CaptionStyle(
        id="elegant",
        font_weight=500,
        font_size=64,
        active_font_family="'Noto Serif', Georgia, serif",
        active_font_size=80,
        glow="rgba(255,255,255,0.9)",
        text_shadow="3px 3px 6px rgba(0,0,0,0.9), -1px -1px 4px rgba(0,0,0,0.7)",
        gap=14,
        fade_in_frames=8,
    ),
    CaptionStyle(
        id="word-pop",
        group_size=0,
        position="center",
        font_weight=900,
        font_size=120,
        stroke="4px black",
        text_shadow="4px 4px 12px rgba(0,0,0,0.6)",
        fade_in_frames=0,
        pop_frames=8,
    ),
    CaptionStyle(
        id="cinematic",
        group_size=6,
        highlight="none",
        font_weight=400,
        font_size=58,
        letter_spacing="0.02em",
        text_shadow="2px 2px 6px rgba(0,0,0,0.7)",
        gap=12,
        fade_in_frames=12,
        fade_out_frames=8,
    ),
    replace(_HEAT_GLOW, id="emoji-auto", emoji=True),
    CaptionStyle(
        id="bold",
        group_size=3,
        highlight="current",
        font_weight=900,
        font_size=84,
        active_color="#FFD60A",
        stroke="3px black",
        uppercase=True,
    ),
    CaptionStyle(
        id="minimal",
        group_size=5,
        highlight="none",
        font_weight=500,
        font_size=52,
        text_shadow="1px 1px 4px rgba(0,0,0,0.6)",
        gap=10,
        fade_in_frames=4,
        fade_out_frames=4,
    ),
    CaptionStyle(
        id="neon",
        highlight="current",
        position="center",
        color="#E0F7FF",
        active_color="#00E5FF",
        glow="#00E5FF",
        font_size=76,
    ),
)


def default_registry(default: str = "heat") -> StyleRegistry:
    """Registry of the built-in styles."""
    return StyleRegistry(BUILTIN_STYLES, default=default)
