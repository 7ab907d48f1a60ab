"""Scene definitions and the LLM-backed scene generator."""

from .generator import SceneGenerator
from .models import SceneDefinition

__all__ = ["SceneDefinition", "SceneGenerator"]
