"""Remote compute and storage backends.

A backend is the boundary to the managed rendering service: it provisions the
bucket and render function, deploys and removes site bundles, starts renders,
reports their progress and streams finished objects out of storage.
"""

import itertools
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterator

from ..config import Config
from .models import (
    BucketInfo,
    FunctionInfo,
    ObjectLocation,
    RenderHandle,
    RenderLimits,
    RenderProgress,
)

logger = logging.getLogger(__name__)


class RenderBackend(ABC):
    """Abstract remote compute/storage collaborator."""

    @abstractmethod
    def get_or_create_bucket(self) -> BucketInfo:
        """Return the render bucket, creating it if needed."""
        pass

    @abstractmethod
    def deploy_function(self, memory_mb: int, timeout_seconds: int, disk_mb: int) -> FunctionInfo:
        """Return the render function, deploying it if needed."""
        pass

    @abstractmethod
    def deploy_site(self, entry_point: Path, bucket_name: str, site_name: str) -> str:
        """Bundle ``entry_point`` and upload it as ``site_name``.

        Returns:
            The serve URL of the deployed site.
        """
        pass

    @abstractmethod
    def delete_site(self, bucket_name: str, site_name: str) -> None:
        """Remove a deployed site."""
        pass

    @abstractmethod
    def render_media(
        self,
        serve_url: str,
        composition_id: str,
        input_props: dict[str, Any],
        limits: RenderLimits,
    ) -> RenderHandle:
        """Start a render and return immediately."""
        pass

    @abstractmethod
    def get_render_progress(self, handle: RenderHandle) -> RenderProgress:
        """Query the progress of a render once."""
        pass

    @abstractmethod
    def iter_object(self, location: ObjectLocation, chunk_size: int = 1024 * 1024) -> Iterator[bytes]:
        """Stream an object's bytes in chunks."""
        pass


class MockRenderBackend(RenderBackend):
    """In-process backend for local development and tests.

    Renders finish after ``polls_until_done`` progress queries and the output
    object is a few placeholder bytes.
    """

    def __init__(self, polls_until_done: int = 2, payload: bytes = b"\x00\x00\x00\x18ftypmp42"):
        self.polls_until_done = polls_until_done
        self.payload = payload
        self.sites: dict[str, str] = {}
        self.bucket_created = False
        self._polls: dict[str, itertools.count] = {}
        self._lock = threading.Lock()

    def get_or_create_bucket(self) -> BucketInfo:
        with self._lock:
            existed = self.bucket_created
            self.bucket_created = True
        return BucketInfo("mock-bucket", already_existed=existed)

    def deploy_function(self, memory_mb: int, timeout_seconds: int, disk_mb: int) -> FunctionInfo:
        return FunctionInfo(f"mock-render-{memory_mb}mb-{timeout_seconds}sec", already_existed=True)

    def deploy_site(self, entry_point: Path, bucket_name: str, site_name: str) -> str:
        if not Path(entry_point).exists():
            raise FileNotFoundError(f"Entry point not found: {entry_point}")
        serve_url = f"https://{bucket_name}.mock/sites/{site_name}/index.html"
        with self._lock:
            self.sites[site_name] = serve_url
        return serve_url

    def delete_site(self, bucket_name: str, site_name: str) -> None:
        with self._lock:
            self.sites.pop(site_name, None)

    def render_media(
        self,
        serve_url: str,
        composition_id: str,
        input_props: dict[str, Any],
        limits: RenderLimits,
    ) -> RenderHandle:
        render_id = uuid.uuid4().hex[:10]
        with self._lock:
            self._polls[render_id] = itertools.count(1)
        return RenderHandle(render_id, "mock-bucket")

    def get_render_progress(self, handle: RenderHandle) -> RenderProgress:
        with self._lock:
            polls = next(self._polls[handle.render_id])
        if polls >= self.polls_until_done:
            return RenderProgress(
                overall_progress=1.0,
                done=True,
                output=ObjectLocation(handle.bucket_name, f"renders/{handle.render_id}/out.mp4"),
            )
        return RenderProgress(overall_progress=polls / self.polls_until_done)

    def iter_object(self, location: ObjectLocation, chunk_size: int = 1024 * 1024) -> Iterator[bytes]:
        for i in range(0, len(self.payload), chunk_size):
            yield self.payload[i : i + chunk_size]


def get_render_backend(config: Config) -> RenderBackend:
    """Get the render backend selected by configuration.

    Raises:
        ValueError: If the backend name is not recognized.
    """
    name = config.render.backend
    if name == "mock":
        return MockRenderBackend()
    elif name == "remotion-lambda":
        from .remotion import RemotionLambdaBackend

        return RemotionLambdaBackend(config.render)
    else:
        raise ValueError(f"Unknown render backend: {name}")
