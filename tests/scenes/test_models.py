"""Tests for scene definitions."""

import json

import pytest
from pydantic import ValidationError

from motion_studio.errors import RequestValidationError, SceneValidationError
from motion_studio.scenes.models import SceneDefinition


class TestFromPayload:
    """Tests for validating raw scene payloads."""

    def test_valid_payload(self):
        scene = SceneDefinition.from_payload(
            {"component_code": "export const MainComposition = () => null;", "duration_in_frames": 150, "fps": 30, "title": "Intro"}
        )
        assert scene.duration_in_frames == 150
        assert scene.fps == 30
        assert scene.title == "Intro"
        assert scene.duration_seconds == 5.0
        assert scene.composition_id == "MainVideo"

    def test_fps_defaults_to_30(self):
        scene = SceneDefinition.from_payload({"component_code": "x", "duration_in_frames": 90})
        assert scene.fps == 30

    def test_float_values_are_rounded(self):
        scene = SceneDefinition.from_payload({"component_code": "x", "duration_in_frames": 149.6, "fps": 29.97})
        assert scene.duration_in_frames == 150
        assert scene.fps == 30

    def test_overrides(self):
        scene = SceneDefinition.from_payload(
            {"component_code": "x", "duration_in_frames": 90}, width=1080, height=1920
        )
        assert (scene.width, scene.height) == (1080, 1920)

    def test_title_truncated(self):
        scene = SceneDefinition.from_payload({"component_code": "x", "duration_in_frames": 90, "title": "t" * 100})
        assert len(scene.title) == 60

    @pytest.mark.parametrize(
        "payload",
        [
            {"component_code": "x"},
            {"component_code": "x", "duration_in_frames": None},
            {"component_code": "x", "duration_in_frames": "150"},
            {"component_code": "x", "duration_in_frames": True},
            {"component_code": "x", "duration_in_frames": 0},
            {"component_code": "x", "duration_in_frames": -30},
            {"component_code": "x", "duration_in_frames": 150, "fps": "30"},
            {"component_code": "x", "duration_in_frames": 150, "fps": 0},
        ],
    )
    def test_rejects_bad_timing(self, payload):
        with pytest.raises(SceneValidationError):
            SceneDefinition.from_payload(payload)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_rejects_non_finite_timing(self, value):
        with pytest.raises(SceneValidationError, match="non-finite duration_in_frames"):
            SceneDefinition.from_payload({"component_code": "x", "duration_in_frames": value})
        with pytest.raises(SceneValidationError, match="non-finite fps"):
            SceneDefinition.from_payload({"component_code": "x", "duration_in_frames": 150, "fps": value})

    def test_non_finite_from_json(self):
        payload = json.loads('{"component_code": "x", "duration_in_frames": NaN}')
        with pytest.raises(SceneValidationError):
            SceneDefinition.from_payload(payload)

    @pytest.mark.parametrize("code", [None, "", "   ", 42])
    def test_rejects_missing_code(self, code):
        with pytest.raises(SceneValidationError, match="component_code"):
            SceneDefinition.from_payload({"component_code": code, "duration_in_frames": 150})

    def test_validation_error_is_request_error(self):
        assert issubclass(SceneValidationError, RequestValidationError)


class TestSceneDefinition:
    """Tests for direct construction."""

    def test_rejects_non_positive_frames(self):
        with pytest.raises(ValidationError):
            SceneDefinition(code="x", duration_in_frames=0, fps=30)
