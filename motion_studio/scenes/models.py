"""Scene definition model shared by prompt renders and caption renders."""

import math
from typing import Any, Mapping

from pydantic import BaseModel, Field

from ..errors import SceneValidationError

DEFAULT_FPS = 30


class SceneDefinition(BaseModel):
    """A renderable Remotion composition.

    ``code`` is the source of the component module. The composition is
    registered under ``composition_id`` and rendered with ``input_props``.
    """

    code: str = Field(min_length=1)
    duration_in_frames: int = Field(gt=0)
    fps: int = Field(gt=0)
    title: str = ""
    composition_id: str = "MainVideo"
    component_name: str = "MainComposition"
    width: int = Field(default=1280, gt=0)
    height: int = Field(default=720, gt=0)
    input_props: dict[str, Any] = Field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        return round(self.duration_in_frames / self.fps, 2)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], **overrides: Any) -> "SceneDefinition":
        """Validate a raw scene payload from the generative collaborator.

        Expects ``component_code``, ``duration_in_frames`` and optionally
        ``fps`` (defaults to 30) and ``title``.

        Raises:
            SceneValidationError: If the code is empty or the timing fields
                are missing, non-numeric or not positive.
        """
        code = payload.get("component_code")
        if not isinstance(code, str) or not code.strip():
            raise SceneValidationError(
                f"Scene has empty or missing component_code (got {type(code).__name__})"
            )

        duration = _positive_number(payload.get("duration_in_frames"), "duration_in_frames")
        raw_fps = payload.get("fps")
        fps = DEFAULT_FPS if raw_fps is None else _positive_number(raw_fps, "fps")

        return cls(
            code=code,
            duration_in_frames=max(1, int(round(duration))),
            fps=max(1, int(round(fps))),
            title=str(payload.get("title") or "").strip()[:60],
            **overrides,
        )


def _positive_number(value: Any, name: str) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneValidationError(f"Scene has invalid {name}: {value!r}")
    if not math.isfinite(value):
        raise SceneValidationError(f"Scene has non-finite {name}: {value!r}")
    if value <= 0:
        raise SceneValidationError(f"Scene has non-positive {name}: {value!r}")
    return float(value)
