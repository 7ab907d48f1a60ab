"""Render submission and single-shot progress queries."""

import logging
from typing import Any

from .backend import RenderBackend
from .models import ObjectLocation, RenderHandle, RenderLimits, RenderProgress

logger = logging.getLogger(__name__)


class RenderDispatcher:
    """Starts remote renders and reports their progress.

    Never blocks waiting for a render; the caller owns the polling loop.
    """

    def __init__(self, backend: RenderBackend):
        self.backend = backend

    def dispatch(
        self,
        serve_url: str,
        composition_id: str,
        input_props: dict[str, Any],
        limits: RenderLimits,
    ) -> RenderHandle:
        handle = self.backend.render_media(serve_url, composition_id, input_props, limits)
        logger.info(
            "[render] Started %s on %s (timeout %dms, %d frames/lambda)",
            handle.render_id,
            composition_id,
            limits.timeout_in_milliseconds,
            limits.frames_per_lambda,
        )
        return handle

    def poll_progress(self, handle: RenderHandle) -> RenderProgress:
        progress = self.backend.get_render_progress(handle)
        # The output bucket may be omitted; it defaults to the render's bucket
        if progress.output is not None and not progress.output.bucket:
            progress = RenderProgress(
                overall_progress=progress.overall_progress,
                done=progress.done,
                fatal_error=progress.fatal_error,
                output=ObjectLocation(handle.bucket_name, progress.output.key),
            )
        return progress
