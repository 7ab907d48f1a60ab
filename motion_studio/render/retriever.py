"""Download finished artifacts from object storage."""

import logging
from pathlib import Path

from .backend import RenderBackend
from .models import ObjectLocation

logger = logging.getLogger(__name__)


class ArtifactRetriever:
    """Streams a rendered object to a local file."""

    def __init__(self, backend: RenderBackend, chunk_size: int = 1024 * 1024):
        self.backend = backend
        self.chunk_size = chunk_size

    def download(self, location: ObjectLocation, dest_path: Path) -> Path:
        """Copy ``location`` to ``dest_path`` chunk by chunk.

        Data goes to ``<dest>.part`` first and is renamed once complete, so a
        failed download never leaves a truncated file at ``dest_path``.

        Returns:
            The destination path.
        """
        dest_path = Path(dest_path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        part_path = dest_path.with_name(dest_path.name + ".part")

        size = 0
        try:
            with open(part_path, "wb") as f:
                for chunk in self.backend.iter_object(location, chunk_size=self.chunk_size):
                    f.write(chunk)
                    size += len(chunk)
            part_path.replace(dest_path)
        except BaseException:
            part_path.unlink(missing_ok=True)
            raise

        logger.info("[download] s3://%s/%s -> %s (%d bytes)", location.bucket, location.key, dest_path, size)
        return dest_path
