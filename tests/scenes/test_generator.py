"""Tests for scene generation."""

import pytest

from motion_studio.errors import LLMError, SceneValidationError
from motion_studio.scenes.generator import SceneGenerator
from motion_studio.scenes.prompts import SCENE_TOOL


class TestSceneGenerator:
    """Tests for SceneGenerator.generate."""

    def test_generates_validated_scene(self, test_config, stub_llm):
        scene = SceneGenerator(test_config, llm=stub_llm).generate("a sunrise over the city")

        assert scene.title == "Sunrise over the city"
        assert scene.duration_in_frames == 150
        assert (scene.width, scene.height) == (test_config.render.width, test_config.render.height)

    def test_passes_prompt_and_tool_schema(self, test_config, stub_llm):
        SceneGenerator(test_config, llm=stub_llm).generate(
            "a product launch", style="neon", brand={"primary_color": "#004e89"}
        )

        call = stub_llm.calls[0]
        assert '"a product launch"' in call["prompt"]
        assert "Visual style: neon" in call["prompt"]
        assert "Brand primary color: #004e89" in call["prompt"]
        assert call["schema"] is SCENE_TOOL
        assert call["system_prompt"]

    def test_rejects_missing_duration(self, test_config, stub_llm):
        del stub_llm.payload["duration_in_frames"]
        with pytest.raises(SceneValidationError):
            SceneGenerator(test_config, llm=stub_llm).generate("anything")

    def test_llm_errors_propagate(self, test_config, stub_llm):
        stub_llm.error = LLMError("rate limited")
        with pytest.raises(LLMError, match="rate limited"):
            SceneGenerator(test_config, llm=stub_llm).generate("anything")

    def test_mock_provider_from_config(self, test_config):
        scene = SceneGenerator(test_config).generate("anything")
        assert scene.title == "Mock composition"
