"""Per-job disposable site deployment."""

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..scenes.models import SceneDefinition
from .backend import RenderBackend
from .models import DeployedSite
from .templates import COMPONENT_FILE, ENTRY_FILE, ENTRY_JSX, ROOT_FILE, build_root_jsx

logger = logging.getLogger(__name__)


def new_site_name(prefix: str) -> str:
    """Unique site name; the random part keeps concurrent jobs apart."""
    return f"{prefix}-{uuid.uuid4()}"


class TransientSiteDeployer:
    """Deploys one scene as a throwaway site and always removes it again."""

    def __init__(self, backend: RenderBackend):
        self.backend = backend

    def write_project(self, workdir: Path, scene: SceneDefinition) -> Path:
        """Write the component, composition and entry files.

        Returns:
            Path to the entry point.
        """
        workdir.mkdir(parents=True, exist_ok=True)
        (workdir / COMPONENT_FILE).write_text(scene.code, encoding="utf-8")
        (workdir / ROOT_FILE).write_text(build_root_jsx(scene), encoding="utf-8")
        entry_point = workdir / ENTRY_FILE
        entry_point.write_text(ENTRY_JSX, encoding="utf-8")
        return entry_point

    def remove(self, bucket_name: str, site_name: str) -> bool:
        """Delete a site. Failures are logged, never raised.

        Returns:
            True if the site was deleted.
        """
        try:
            self.backend.delete_site(bucket_name, site_name)
            logger.info("[deploy] Removed temp site %s", site_name)
            return True
        except Exception as e:
            logger.warning("[deploy] Failed to delete temp site %s: %s", site_name, e)
            return False

    @contextmanager
    def transient_site(
        self,
        scene: SceneDefinition,
        bucket_name: str,
        workdir: Path,
        prefix: str = "ms-render",
    ) -> Iterator[DeployedSite]:
        """Deploy ``scene`` for the duration of the block.

        The site is removed when the block exits, whether it exits normally or
        with an exception. Removal is also attempted when the deploy call
        itself failed, since a partial upload may already be in the bucket.
        """
        entry_point = self.write_project(workdir, scene)
        site_name = new_site_name(prefix)
        logger.info("[deploy] Bundling and deploying site %s", site_name)
        try:
            serve_url = self.backend.deploy_site(entry_point, bucket_name, site_name)
            yield DeployedSite(site_name=site_name, bucket_name=bucket_name, serve_url=serve_url)
        finally:
            self.remove(bucket_name, site_name)
