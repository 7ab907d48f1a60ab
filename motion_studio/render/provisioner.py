"""Idempotent acquisition of the durable remote resources a render needs."""

import logging

from ..config import RenderConfig
from .backend import RenderBackend
from .models import BucketInfo, FunctionInfo

logger = logging.getLogger(__name__)


class ResourceProvisioner:
    """Gets or creates the render bucket and function.

    Safe to call any number of times: a resource that already exists is a
    success and is reported as such.
    """

    def __init__(self, backend: RenderBackend, config: RenderConfig | None = None):
        self.backend = backend
        self.config = config or RenderConfig()

    def ensure_bucket(self) -> BucketInfo:
        bucket = self.backend.get_or_create_bucket()
        logger.info(
            "[provision] Bucket: %s (%s)",
            bucket.bucket_name,
            "already existed" if bucket.already_existed else "newly created",
        )
        return bucket

    def ensure_function(self) -> FunctionInfo:
        function = self.backend.deploy_function(
            memory_mb=self.config.function_memory_mb,
            timeout_seconds=self.config.function_timeout_seconds,
            disk_mb=self.config.function_disk_mb,
        )
        logger.info(
            "[provision] Function: %s (%s)",
            function.function_name,
            "already existed" if function.already_existed else "newly created",
        )
        return function

    def provision(self) -> tuple[FunctionInfo, BucketInfo]:
        """Ensure both the render function and the bucket exist."""
        return self.ensure_function(), self.ensure_bucket()
