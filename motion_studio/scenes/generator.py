"""Scene generation from a text prompt."""

import logging

from ..config import Config, load_config
from ..llm import LLMProvider, get_llm_provider
from .models import SceneDefinition
from .prompts import SCENE_SYSTEM_PROMPT, SCENE_TOOL, SCENE_USER_PROMPT

logger = logging.getLogger(__name__)


class SceneGenerator:
    """Ask the LLM for a Remotion composition and validate what comes back."""

    def __init__(self, config: Config | None = None, llm: LLMProvider | None = None):
        self.config = config or load_config()
        self.llm = llm or get_llm_provider(self.config)

    def generate(
        self,
        prompt: str,
        style: str | None = None,
        brand: dict[str, str] | None = None,
    ) -> SceneDefinition:
        """Generate a scene for ``prompt``.

        Args:
            prompt: Creative brief.
            style: Optional visual style hint.
            brand: Optional brand context, e.g. ``{"primary_color": "#004e89"}``.

        Returns:
            A validated scene definition.

        Raises:
            SceneValidationError: If the response lacks usable code or timing.
            LLMError: If the provider call fails.
        """
        logger.info('[scenes] Generating composition for: "%s"', prompt[:80])

        payload = self.llm.generate_json(
            SCENE_USER_PROMPT.format(prompt=prompt, context=_context(style, brand)),
            system_prompt=SCENE_SYSTEM_PROMPT,
            schema=SCENE_TOOL,
        )
        scene = SceneDefinition.from_payload(
            payload,
            width=self.config.render.width,
            height=self.config.render.height,
        )

        logger.info(
            '[scenes] Generated "%s" - %d frames @ %dfps (%d chars)',
            scene.title,
            scene.duration_in_frames,
            scene.fps,
            len(scene.code),
        )
        return scene


def _context(style: str | None, brand: dict[str, str] | None) -> str:
    lines = []
    if style:
        lines.append(f"Visual style: {style}")
    for key, value in (brand or {}).items():
        lines.append(f"Brand {key.replace('_', ' ')}: {value}")
    return "\n" + "\n".join(lines) + "\n" if lines else ""
