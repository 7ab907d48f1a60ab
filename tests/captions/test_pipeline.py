"""Tests for the caption workflow."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from motion_studio.audio.transcribe import MockTranscriber
from motion_studio.captions import pipeline as caption_pipeline
from motion_studio.captions.media import VideoInfo
from motion_studio.captions.pipeline import CaptionPipeline, CaptionRequest
from motion_studio.pipeline.jobs import JobResult
from motion_studio.pipeline.orchestrator import JobContext


@pytest.fixture
def media_stubs(monkeypatch):
    """Replace network and ffmpeg calls with local file writes."""
    calls = []

    def fake_download(url, dest_path, timeout=120.0, client=None):
        calls.append(("download", url))
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        dest_path.write_bytes(b"source")
        return 6

    def fake_extract(video_path, audio_path, ffmpeg="ffmpeg"):
        calls.append(("extract", video_path.name))
        audio_path.write_bytes(b"wav")
        return audio_path

    def fake_probe(video_path, ffprobe="ffprobe"):
        calls.append(("probe", video_path.name))
        return VideoInfo(1080, 1920, 3.0)

    def fake_burn(video_path, srt_path, output_path, style, ffmpeg="ffmpeg"):
        calls.append(("burn", srt_path.read_text()))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"burned")
        return output_path

    monkeypatch.setattr(caption_pipeline, "download_video", fake_download)
    monkeypatch.setattr(caption_pipeline, "extract_audio", fake_extract)
    monkeypatch.setattr(caption_pipeline, "probe_video", fake_probe)
    monkeypatch.setattr(caption_pipeline, "burn_subtitles", fake_burn)
    return calls


@pytest.fixture
def ctx(tmp_path: Path) -> JobContext:
    workdir = tmp_path / "tmp" / "job_abc"
    workdir.mkdir(parents=True)
    return JobContext(
        job_id="job_abc",
        workdir=workdir,
        output_path=tmp_path / "videos" / "job_abc.mp4",
        video_url="http://studio.test/videos/job_abc.mp4",
        report=MagicMock(),
        render=MagicMock(
            return_value=JobResult(
                url="http://studio.test/videos/job_abc.mp4",
                title="Captions - heat",
                duration_seconds=1.9,
                fps=30,
            )
        ),
    )


class TestCaptionPipeline:
    """Tests for CaptionPipeline.run."""

    def test_remote_render(self, test_config, transcriber, ctx, media_stubs):
        result = CaptionPipeline(test_config, transcriber=transcriber).run(
            ctx, CaptionRequest(video_url="https://cdn.test/in.mp4", style="word-pop")
        )

        ctx.render.assert_called_once()
        scene = ctx.render.call_args[0][0]
        limits = ctx.render.call_args[1]["limits"]
        assert scene.composition_id == "CaptionsVideo"
        assert (scene.width, scene.height) == (1080, 1920)
        assert scene.input_props["styleConfig"]["id"] == "word-pop"
        assert limits.timeout_in_milliseconds == 240_000
        assert limits.frames_per_lambda == 60
        assert ctx.render.call_args[1]["site_prefix"] == "ms-captions"

        assert result.url == "http://studio.test/videos/job_abc.mp4"
        assert [w["word"] for w in result.words] == ["the", "quick", "brown", "fox", "jumps"]
        assert [c[0] for c in media_stubs] == ["download", "extract", "probe"]

    def test_empty_transcript_skips_render(self, test_config, ctx, media_stubs):
        pipeline = CaptionPipeline(test_config, transcriber=MockTranscriber([]))
        result = pipeline.run(ctx, CaptionRequest(video_url="https://cdn.test/silent.mp4", style="heat"))

        assert result.url is None
        assert result.words == []
        ctx.render.assert_not_called()
        assert "probe" not in [c[0] for c in media_stubs]

    def test_burn_mode(self, test_config, transcriber, ctx, media_stubs):
        result = CaptionPipeline(test_config, transcriber=transcriber).run(
            ctx, CaptionRequest(video_url="https://cdn.test/in.mp4", style="bold", mode="burn")
        )

        ctx.render.assert_not_called()
        assert ctx.output_path.read_bytes() == b"burned"
        assert result.url == ctx.video_url
        assert len(result.words) == 5
        srt = media_stubs[-1][1]
        # bold groups three words at a time and uppercases them
        assert "THE QUICK BROWN FOX\n" in srt
        assert "JUMPS\n" in srt

    def test_reports_steps(self, test_config, transcriber, ctx, media_stubs):
        CaptionPipeline(test_config, transcriber=transcriber).run(
            ctx, CaptionRequest(video_url="https://cdn.test/in.mp4", style="heat")
        )
        steps = [c[0][0] for c in ctx.report.call_args_list]
        assert steps == ["Downloading video", "Extracting audio", "Transcribing"]

    def test_transcriber_failure_propagates(self, test_config, ctx, media_stubs):
        from motion_studio.errors import TranscriptionError

        transcriber = MagicMock()
        transcriber.transcribe.side_effect = TranscriptionError("quota exceeded")
        with pytest.raises(TranscriptionError):
            CaptionPipeline(test_config, transcriber=transcriber).run(
                ctx, CaptionRequest(video_url="https://cdn.test/in.mp4", style="heat")
            )
        ctx.render.assert_not_called()
