"""Build the caption overlay scene rendered on remote compute."""

from functools import lru_cache
from importlib import resources
from typing import Any, Sequence

from ..scenes.models import SceneDefinition
from .styles import CaptionStyle
from .timing import TimestampedWord, composition_duration_frames

CAPTIONS_COMPOSITION_ID = "CaptionsVideo"
CAPTIONS_COMPONENT = "CaptionsComposition"


@lru_cache(maxsize=1)
def composition_source() -> str:
    """Source of the bundled caption composition."""
    return (
        (resources.files("motion_studio.captions") / "assets" / "CaptionsComposition.jsx")
        .read_text(encoding="utf-8")
    )


def build_caption_scene(
    video_url: str,
    words: Sequence[TimestampedWord],
    style: CaptionStyle,
    width: int,
    height: int,
    fps: int = 30,
    emoji_cues: Sequence[dict[str, Any]] = (),
    tail_padding: float = 0.5,
) -> SceneDefinition:
    """Scene that plays the source video with ``style`` captions on top.

    Runs until ``tail_padding`` seconds after the last word ends.

    Raises:
        ValueError: If ``words`` is empty; there is nothing to caption.
    """
    if not words:
        raise ValueError("Cannot build a caption scene without words")

    return SceneDefinition(
        code=composition_source(),
        duration_in_frames=composition_duration_frames(words, fps, tail_padding),
        fps=fps,
        title=f"Captions - {style.id}",
        composition_id=CAPTIONS_COMPOSITION_ID,
        component_name=CAPTIONS_COMPONENT,
        width=width,
        height=height,
        input_props={
            "videoUrl": video_url,
            "words": [w.to_dict() for w in words],
            "style": style.id,
            "styleConfig": style.to_props(),
            "emojiCues": list(emoji_cues),
        },
    )
