"""Caption workflow: transcribe a source video and render captions over it."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from ..audio.transcribe import Transcriber, get_transcriber
from ..config import Config
from ..pipeline.jobs import JobResult
from ..render.models import RenderLimits
from .composition import build_caption_scene
from .media import download_video, extract_audio, probe_video
from .styles import StyleRegistry, default_registry
from .subtitles import build_srt, burn_subtitles
from .timing import group_words

if TYPE_CHECKING:
    from ..pipeline.orchestrator import JobContext

logger = logging.getLogger(__name__)

CaptionMode = Literal["remotion", "burn"]

SOURCE_FILE = "source.mp4"
AUDIO_FILE = "audio.wav"
SRT_FILE = "captions.srt"


@dataclass
class CaptionRequest:
    """A validated caption job request."""

    video_url: str
    style: str
    mode: CaptionMode = "remotion"
    emoji_cues: list[dict[str, Any]] = field(default_factory=list)


class CaptionPipeline:
    """Runs one caption job inside a job context.

    Steps: download the source video, extract its audio, transcribe it, then
    either render the caption composition remotely (``remotion`` mode) or
    burn plain subtitles locally with ffmpeg (``burn`` mode).
    """

    def __init__(
        self,
        config: Config | None = None,
        transcriber: Transcriber | None = None,
        registry: StyleRegistry | None = None,
    ):
        self.config = config or Config()
        self.transcriber = transcriber or get_transcriber(self.config)
        self.registry = registry or default_registry(self.config.captions.default_style)

    def run(self, ctx: "JobContext", request: CaptionRequest) -> JobResult:
        captions = self.config.captions
        tag = f"[captions:{ctx.job_id}]"
        style = self.registry.get(request.style)

        ctx.report("Downloading video", 0.05)
        source = ctx.workdir / SOURCE_FILE
        size = download_video(request.video_url, source, timeout=captions.download_timeout_seconds)
        logger.info("%s Downloaded %d bytes", tag, size)

        ctx.report("Extracting audio", 0.1)
        audio = extract_audio(source, ctx.workdir / AUDIO_FILE, ffmpeg=captions.ffmpeg_binary)

        ctx.report("Transcribing", 0.15)
        words = self.transcriber.transcribe(audio)
        logger.info("%s Transcribed %d words", tag, len(words))
        word_dicts = [w.to_dict() for w in words]

        if not words:
            logger.info("%s No speech found, skipping render", tag)
            return JobResult(url=None, title="No speech detected", words=[])

        if request.mode == "burn":
            ctx.report("Burning subtitles", 0.3)
            group_size = style.group_size or 1
            srt_path = ctx.workdir / SRT_FILE
            srt_path.write_text(build_srt(group_words(words, group_size), style.uppercase), encoding="utf-8")
            burn_subtitles(source, srt_path, ctx.output_path, style, ffmpeg=captions.ffmpeg_binary)
            return JobResult(
                url=ctx.video_url,
                title=f"Captions - {style.id}",
                duration_seconds=round(words[-1].end + captions.tail_padding_seconds, 3),
                words=word_dicts,
            )

        info = probe_video(source, ffprobe=captions.ffprobe_binary)
        logger.info("%s Video %dx%d", tag, info.width, info.height)
        scene = build_caption_scene(
            video_url=request.video_url,
            words=words,
            style=style,
            width=info.width,
            height=info.height,
            fps=captions.fps,
            emoji_cues=request.emoji_cues,
            tail_padding=captions.tail_padding_seconds,
        )
        result = ctx.render(
            scene,
            limits=RenderLimits(
                timeout_in_milliseconds=captions.timeout_in_milliseconds,
                frames_per_lambda=captions.frames_per_lambda,
                codec=self.config.render.codec,
            ),
            site_prefix=captions.site_prefix,
        )
        result.words = word_dicts
        return result
