"""Job orchestration for render and caption jobs.

A job is created synchronously when a request is accepted and advanced
entirely by a worker thread. Each job walks

    scene -> provision -> deploy site -> dispatch -> poll -> download

and ends in exactly one terminal state. Whatever happens, the job's transient
site and its local working directory are removed before the job is marked
finished, and the notifier is called once afterwards.
"""

import logging
import shutil
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from ..captions.styles import StyleRegistry, default_registry
from ..config import Config
from ..errors import (
    JobQueueFullError,
    RenderFailedError,
    RenderTimeoutError,
    RequestValidationError,
    StorageError,
)
from ..notify import Notifier, get_notifier
from ..render.backend import RenderBackend, get_render_backend
from ..render.deployer import TransientSiteDeployer
from ..render.dispatcher import RenderDispatcher
from ..render.models import ObjectLocation, RenderHandle, RenderLimits
from ..render.provisioner import ResourceProvisioner
from ..render.retriever import ArtifactRetriever
from ..scenes.generator import SceneGenerator
from ..scenes.models import SceneDefinition
from .jobs import JobKind, JobResult, JobStatus, RenderJob
from .store import InMemoryJobStore, JobStore

if TYPE_CHECKING:
    from ..captions.pipeline import CaptionPipeline

logger = logging.getLogger(__name__)

CAPTION_MODES = ("remotion", "burn")
MAX_ERROR_LENGTH = 500


@dataclass
class JobContext:
    """What a workflow sees of its own job."""

    job_id: str
    workdir: Path
    output_path: Path
    video_url: str
    report: Callable[[str, float | None], None]
    render: Callable[..., JobResult]


class JobOrchestrator:
    """Accepts jobs, runs them on a bounded worker pool and tracks their state.

    Jobs are independent of each other; the job store is the only state they
    share. At most ``jobs.max_pending`` jobs may be queued or running at once.
    """

    def __init__(
        self,
        config: Config | None = None,
        store: JobStore | None = None,
        backend: RenderBackend | None = None,
        scene_generator: SceneGenerator | None = None,
        caption_pipeline: "CaptionPipeline | None" = None,
        notifier: Notifier | None = None,
        registry: StyleRegistry | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or Config()
        self.store = store or InMemoryJobStore()
        self.backend = backend or get_render_backend(self.config)
        self.registry = registry or default_registry(self.config.captions.default_style)
        self.notifier = notifier or get_notifier(self.config.notify)
        self._scene_generator = scene_generator
        self._caption_pipeline = caption_pipeline
        self._sleep = sleep
        self._clock = clock

        self.provisioner = ResourceProvisioner(self.backend, self.config.render)
        self.deployer = TransientSiteDeployer(self.backend)
        self.dispatcher = RenderDispatcher(self.backend)
        self.retriever = ArtifactRetriever(self.backend)

        jobs = self.config.jobs
        self._executor = ThreadPoolExecutor(max_workers=jobs.max_workers, thread_name_prefix="job")
        self._slots = threading.BoundedSemaphore(jobs.max_pending)
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None

    @property
    def scene_generator(self) -> SceneGenerator:
        if self._scene_generator is None:
            self._scene_generator = SceneGenerator(self.config)
        return self._scene_generator

    @property
    def caption_pipeline(self) -> "CaptionPipeline":
        if self._caption_pipeline is None:
            from ..captions.pipeline import CaptionPipeline

            self._caption_pipeline = CaptionPipeline(self.config, registry=self.registry)
        return self._caption_pipeline

    # -- submission -------------------------------------------------------

    def submit_render(
        self,
        prompt: str,
        style: str | None = None,
        brand: dict[str, str] | None = None,
    ) -> str:
        """Queue a prompt-to-video job.

        Raises:
            RequestValidationError: If the prompt is empty or too long.
            JobQueueFullError: If the worker pool is saturated.
        """
        if not isinstance(prompt, str) or not prompt.strip():
            raise RequestValidationError("prompt is required")
        limit = self.config.server.max_prompt_length
        if len(prompt) > limit:
            raise RequestValidationError(f"prompt exceeds {limit} characters")

        prompt = prompt.strip()

        def workflow(ctx: JobContext) -> JobResult:
            ctx.report("Generating scene", 0.02)
            scene = self.scene_generator.generate(prompt, style=style, brand=brand)
            logger.info(
                "[renderer:%s] Scene %r: %d frames @ %dfps",
                ctx.job_id,
                scene.title,
                scene.duration_in_frames,
                scene.fps,
            )
            return ctx.render(scene)

        return self._submit(JobKind.RENDER, workflow)

    def submit_captions(
        self,
        video_url: str,
        style: str | None = None,
        mode: str | None = None,
        emoji_cues: list[dict[str, Any]] | None = None,
    ) -> str:
        """Queue a caption job for a source video.

        Raises:
            RequestValidationError: If the URL, style, mode or emoji cues are invalid.
            JobQueueFullError: If the worker pool is saturated.
        """
        from ..captions.pipeline import CaptionRequest

        if not isinstance(video_url, str) or not video_url.strip():
            raise RequestValidationError("video_url is required")
        video_url = video_url.strip()
        if not video_url.startswith(("http://", "https://")):
            raise RequestValidationError("video_url must be an http(s) URL")

        style = style or self.config.captions.default_style
        if style not in self.registry:
            raise RequestValidationError(
                f"Unknown caption style: {style}. Available: {', '.join(self.registry.ids())}"
            )

        mode = mode or self.config.captions.mode
        if mode not in CAPTION_MODES:
            raise RequestValidationError(f"mode must be one of {', '.join(CAPTION_MODES)}")

        cues = list(emoji_cues or [])
        for cue in cues:
            if not isinstance(cue, dict) or "startFrame" not in cue or "emojiUrl" not in cue:
                raise RequestValidationError("emoji_cues entries need startFrame and emojiUrl")
            start = cue["startFrame"]
            if isinstance(start, bool) or not isinstance(start, int) or start < 0:
                raise RequestValidationError("emoji_cues startFrame must be a non-negative integer")

        request = CaptionRequest(video_url=video_url, style=style, mode=mode, emoji_cues=cues)
        return self._submit(JobKind.CAPTIONS, lambda ctx: self.caption_pipeline.run(ctx, request))

    def _submit(self, kind: JobKind, workflow: Callable[[JobContext], JobResult]) -> str:
        if not self._slots.acquire(blocking=False):
            raise JobQueueFullError(
                f"Too many jobs in flight (limit {self.config.jobs.max_pending}); try again later"
            )

        job_id = f"job_{uuid.uuid4().hex[:12]}"
        self.store.put(RenderJob(id=job_id, kind=kind, step="Queued"))
        logger.info("[jobs] Accepted %s job %s", kind.value, job_id)

        try:
            self._executor.submit(self._run, job_id, workflow)
        except RuntimeError:
            # Executor already shut down
            self._slots.release()
            self.store.delete(job_id)
            raise JobQueueFullError("Job orchestrator is shutting down")
        return job_id

    # -- execution --------------------------------------------------------

    def _context(self, job_id: str) -> JobContext:
        paths = self.config.paths
        ctx = JobContext(
            job_id=job_id,
            workdir=Path(paths.tmp_dir) / job_id,
            output_path=Path(paths.videos_dir) / f"{job_id}.mp4",
            video_url=f"{self.config.server.public_url}/videos/{job_id}.mp4",
            report=lambda step, progress=None: self._report(job_id, step, progress),
            render=lambda scene, limits=None, site_prefix=None: self.render_scene(
                ctx, scene, limits, site_prefix
            ),
        )
        return ctx

    def _run(self, job_id: str, workflow: Callable[[JobContext], JobResult]) -> None:
        ctx = self._context(job_id)
        result: JobResult | None = None
        error: str | None = None
        try:
            ctx.workdir.mkdir(parents=True, exist_ok=True)
            result = workflow(ctx)
        except Exception as e:
            logger.exception("[jobs] Job %s failed", job_id)
            error = _short_message(e)
        finally:
            self._remove_workdir(ctx.workdir)
            self._slots.release()

        self._finish(job_id, result, error)

    def _report(self, job_id: str, step: str, progress: float | None = None) -> None:
        self.store.update(job_id, lambda job: job.set_step(step, progress))

    def render_scene(
        self,
        ctx: JobContext,
        scene: SceneDefinition,
        limits: RenderLimits | None = None,
        site_prefix: str | None = None,
    ) -> JobResult:
        """Render ``scene`` remotely and download it to the job's output path.

        The transient site is removed on every exit path before this returns.
        """
        render = self.config.render
        tag = f"[renderer:{ctx.job_id}]"
        limits = limits or RenderLimits(
            timeout_in_milliseconds=render.timeout_in_milliseconds,
            frames_per_lambda=render.frames_per_lambda,
            codec=render.codec,
        )

        ctx.report("Provisioning", 0.2)
        bucket = self.provisioner.ensure_bucket()

        ctx.report("Deploying site", 0.25)
        site_dir = ctx.workdir / "site"
        with self.deployer.transient_site(
            scene, bucket.bucket_name, site_dir, prefix=site_prefix or render.site_prefix
        ) as site:
            logger.info("%s Site deployed: %s", tag, site.serve_url)

            ctx.report("Rendering", 0.3)
            handle = self.dispatcher.dispatch(
                site.serve_url,
                scene.composition_id,
                scene.input_props,
                limits,
            )
            output = self._wait_for_render(ctx, handle)

            ctx.report("Downloading", 0.95)
            try:
                self.retriever.download(output, ctx.output_path)
            except OSError as e:
                raise StorageError(f"Failed to store rendered video: {e}") from e

        return JobResult(
            url=ctx.video_url,
            title=scene.title,
            duration_seconds=round(scene.duration_seconds, 3),
            fps=scene.fps,
        )

    def _wait_for_render(self, ctx: JobContext, handle: RenderHandle) -> ObjectLocation:
        """Poll until the render is done, failed or past its deadline.

        Raises:
            RenderFailedError: On a fatal error reported by remote compute.
            RenderTimeoutError: When ``render.max_wait_seconds`` elapses first.
        """
        render = self.config.render
        deadline = None if render.max_wait_seconds is None else self._clock() + render.max_wait_seconds

        while True:
            self._sleep(render.poll_interval_seconds)
            progress = self.dispatcher.poll_progress(handle)
            if progress.fatal_error:
                raise RenderFailedError(f"Render failed: {progress.fatal_error}")
            if progress.done:
                if progress.output is None:
                    raise RenderFailedError("Render finished without an output file")
                return progress.output

            percent = round(progress.overall_progress * 100)
            logger.info("[renderer:%s] Progress: %d%%", ctx.job_id, percent)
            ctx.report(f"Rendering {percent}%", 0.3 + 0.6 * progress.overall_progress)

            if deadline is not None and self._clock() >= deadline:
                raise RenderTimeoutError(
                    f"Render {handle.render_id} did not finish within {render.max_wait_seconds:g}s"
                )

    def _remove_workdir(self, workdir: Path) -> None:
        try:
            shutil.rmtree(workdir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("[jobs] Failed to remove %s: %s", workdir, e)

    def _finish(self, job_id: str, result: JobResult | None, error: str | None) -> None:
        def finish(job: RenderJob) -> None:
            if error is not None or result is None:
                job.mark_error(error or "Job produced no result")
            else:
                job.mark_done(result)

        job = self.store.update(job_id, finish)
        if job is None:
            # Evicted by the retention sweep while still running
            logger.warning("[jobs] Job %s expired before it finished", job_id)
            return

        if job.status == JobStatus.DONE:
            logger.info("[jobs] Job %s done: %s", job_id, job.result.url if job.result else None)
        else:
            logger.info("[jobs] Job %s failed: %s", job_id, job.error)
        self.notifier.notify(job)

    # -- queries and housekeeping -----------------------------------------

    def get_status(self, job_id: str) -> RenderJob | None:
        """Current snapshot of a job, or None if unknown or expired.

        Jobs past the retention window are hidden even before the sweeper
        has evicted them.
        """
        job = self.store.get(job_id)
        if job is None or self._is_expired(job):
            return None
        return job

    def list_jobs(self) -> list[RenderJob]:
        return [job for job in self.store.list() if not self._is_expired(job)]

    def _is_expired(self, job: RenderJob) -> bool:
        age = (datetime.now() - job.created_at).total_seconds()
        return age > self.config.jobs.retention_seconds

    def sweep_expired(self) -> int:
        """Evict jobs older than the retention window, in any state."""
        removed = self.store.sweep(self.config.jobs.retention_seconds)
        if removed:
            logger.info("[jobs] Swept %d expired job(s)", removed)
        return removed

    def start(self) -> None:
        """Start the periodic retention sweeper."""
        if self._sweeper is not None:
            return
        self._stop.clear()
        self._sweeper = threading.Thread(target=self._sweep_loop, name="job-sweeper", daemon=True)
        self._sweeper.start()

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.config.jobs.sweep_interval_seconds):
            try:
                self.sweep_expired()
            except Exception:
                logger.exception("[jobs] Retention sweep failed")

    def shutdown(self, wait: bool = True) -> None:
        """Stop the sweeper and the worker pool.

        Args:
            wait: Whether to wait for running jobs to complete.
        """
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=5)
            self._sweeper = None
        self._executor.shutdown(wait=wait)


def _short_message(error: Exception) -> str:
    message = str(error).strip() or type(error).__name__
    if len(message) > MAX_ERROR_LENGTH:
        message = message[: MAX_ERROR_LENGTH - 3] + "..."
    return message
