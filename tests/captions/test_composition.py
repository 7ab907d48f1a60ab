"""Tests for the caption overlay scene and the subtitle fallback."""

from pathlib import Path
from unittest.mock import patch

import pytest

from motion_studio.captions.composition import (
    CAPTIONS_COMPONENT,
    CAPTIONS_COMPOSITION_ID,
    build_caption_scene,
    composition_source,
)
from motion_studio.captions.styles import default_registry
from motion_studio.captions.subtitles import build_srt, burn_subtitles, force_style, format_srt_time
from motion_studio.captions.timing import group_words


class TestBuildCaptionScene:
    """Tests for building the caption composition scene."""

    def test_scene_fields(self, sample_words):
        style = default_registry().get("elegant")
        scene = build_caption_scene(
            "https://cdn.test/in.mp4",
            sample_words,
            style,
            width=1080,
            height=1920,
            fps=30,
        )

        assert scene.composition_id == CAPTIONS_COMPOSITION_ID
        assert scene.component_name == CAPTIONS_COMPONENT
        assert (scene.width, scene.height) == (1080, 1920)
        # ceil((1.4 + 0.5) * 30)
        assert scene.duration_in_frames == 57
        assert scene.code == composition_source()

    def test_input_props(self, sample_words):
        style = default_registry().get("emoji-auto")
        cues = [{"startFrame": 5, "emojiUrl": "https://cdn.test/e.webm"}]
        scene = build_caption_scene(
            "https://cdn.test/in.mp4", sample_words, style, 1280, 720, emoji_cues=cues
        )

        props = scene.input_props
        assert props["videoUrl"] == "https://cdn.test/in.mp4"
        assert props["words"][2] == {"word": "brown", "start": 0.5, "end": 0.8}
        assert props["styleConfig"]["id"] == "emoji-auto"
        assert props["styleConfig"]["emoji"] is True
        assert props["emojiCues"] == cues

    def test_requires_words(self):
        with pytest.raises(ValueError, match="without words"):
            build_caption_scene("https://cdn.test/in.mp4", [], default_registry().get("heat"), 1280, 720)

    def test_bundled_composition(self):
        source = composition_source()
        assert f"export const {CAPTIONS_COMPONENT}" in source
        assert "styleConfig" in source


class TestSubtitles:
    """Tests for SRT generation and ffmpeg burn-in."""

    def test_format_srt_time(self):
        assert format_srt_time(0) == "00:00:00,000"
        assert format_srt_time(3723.456) == "01:02:03,456"

    def test_build_srt(self, sample_words):
        srt = build_srt(group_words(sample_words, 2))

        assert srt.startswith("1\n00:00:00,000 --> 00:00:00,500\nthe quick\n")
        assert "2\n00:00:00,500 --> 00:00:01,400\nbrown fox jumps\n" in srt

    def test_build_srt_uppercase(self, sample_words):
        assert "THE QUICK" in build_srt(group_words(sample_words, 2), uppercase=True)

    def test_force_style(self):
        style = default_registry().get("word-pop")
        forced = force_style(style)
        assert "Fontsize=40" in forced
        assert "PrimaryColour=&H00FFFFFF" in forced
        assert "Alignment=5" in forced

    def test_burn_subtitles_invokes_ffmpeg(self, tmp_path: Path):
        with patch("motion_studio.captions.media.subprocess.run") as mock_run:
            mock_run.return_value.returncode = 0
            out = burn_subtitles(
                tmp_path / "in.mp4",
                tmp_path / "captions.srt",
                tmp_path / "out" / "final.mp4",
                default_registry().get("heat"),
            )

        assert out == tmp_path / "out" / "final.mp4"
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-vf") + 1].startswith("subtitles=")
        assert cmd[-1] == str(out)
