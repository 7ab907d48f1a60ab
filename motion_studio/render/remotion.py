"""Remotion Lambda backend.

- Buckets and output objects go through boto3 (S3).
- Function and site deployment shell out to the Remotion CLI, which owns the
  webpack bundling step and must run where ``node_modules`` is installed.
- Renders are started and polled with the ``remotion-lambda`` Python SDK.
"""

import logging
import subprocess
import uuid
from pathlib import Path
from typing import Any, Iterator

from ..config import RenderConfig
from ..errors import DeploymentError, RenderFailedError, StorageError
from .backend import RenderBackend
from .models import (
    BucketInfo,
    FunctionInfo,
    ObjectLocation,
    RenderHandle,
    RenderLimits,
    RenderProgress,
)

logger = logging.getLogger(__name__)

BUCKET_PREFIX = "remotionlambda-"


class RemotionLambdaBackend(RenderBackend):
    """Render backend backed by Remotion Lambda on AWS."""

    def __init__(self, config: RenderConfig, s3_client: Any = None, cli_timeout: int = 600):
        """Initialize the backend.

        Args:
            config: Render configuration (region, function name, CLI command).
            s3_client: Optional preconfigured boto3 S3 client.
            cli_timeout: Timeout in seconds for each Remotion CLI call.
        """
        self.config = config
        self.cli_timeout = cli_timeout
        self._s3 = s3_client

    @property
    def s3(self):
        """Lazy-init boto3 S3 client."""
        if self._s3 is None:
            import boto3

            self._s3 = boto3.client("s3", region_name=self.config.region)
        return self._s3

    def _client(self, serve_url: str = ""):
        if not self.config.function_name:
            raise DeploymentError(
                "REMOTION_FUNCTION_NAME is not set. Run `motion-studio provision` first."
            )
        from remotion_lambda import RemotionClient

        return RemotionClient(
            region=self.config.region,
            serve_url=serve_url,
            function_name=self.config.function_name,
        )

    # --- Provisioning ---

    def get_or_create_bucket(self) -> BucketInfo:
        from botocore.exceptions import ClientError

        region_tag = self.config.region.replace("-", "")
        prefix = f"{BUCKET_PREFIX}{region_tag}-"
        bucket_name = None
        try:
            buckets = self.s3.list_buckets().get("Buckets", [])
            existing = sorted(b["Name"] for b in buckets if b["Name"].startswith(prefix))
            if existing:
                return BucketInfo(existing[0], already_existed=True)

            bucket_name = f"{prefix}{uuid.uuid4().hex[:10]}"
            params: dict[str, Any] = {"Bucket": bucket_name}
            if self.config.region != "us-east-1":
                params["CreateBucketConfiguration"] = {"LocationConstraint": self.config.region}
            self.s3.create_bucket(**params)
            return BucketInfo(bucket_name, already_existed=False)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code == "BucketAlreadyOwnedByYou" and bucket_name:
                return BucketInfo(bucket_name, already_existed=True)
            raise DeploymentError(f"Could not get or create bucket: {e}") from e

    def deploy_function(self, memory_mb: int, timeout_seconds: int, disk_mb: int) -> FunctionInfo:
        before = set(self._run_cli(["lambda", "functions", "ls", "-q"]).split())
        output = self._run_cli(
            [
                "lambda",
                "functions",
                "deploy",
                f"--memory={memory_mb}",
                f"--timeout={timeout_seconds}",
                f"--disk={disk_mb}",
                "-q",
            ]
        )
        function_name = output.strip().splitlines()[-1].strip()
        return FunctionInfo(function_name, already_existed=function_name in before)

    # --- Sites ---

    def deploy_site(self, entry_point: Path, bucket_name: str, site_name: str) -> str:
        output = self._run_cli(
            [
                "lambda",
                "sites",
                "create",
                str(Path(entry_point).resolve()),
                f"--site-name={site_name}",
                f"--force-bucket-name={bucket_name}",
                "-q",
            ]
        )
        serve_url = output.strip().splitlines()[-1].strip() if output.strip() else ""
        if not serve_url.startswith("http"):
            raise DeploymentError(f"Site deploy returned no serve URL: {output[:200]!r}")
        return serve_url

    def delete_site(self, bucket_name: str, site_name: str) -> None:
        self._run_cli(
            [
                "lambda",
                "sites",
                "rm",
                site_name,
                f"--force-bucket-name={bucket_name}",
                "--yes",
            ]
        )

    # --- Renders ---

    def render_media(
        self,
        serve_url: str,
        composition_id: str,
        input_props: dict[str, Any],
        limits: RenderLimits,
    ) -> RenderHandle:
        from remotion_lambda import RenderMediaParams

        params = RenderMediaParams(
            composition=composition_id,
            codec=limits.codec,
            input_props=input_props,
            frames_per_lambda=limits.frames_per_lambda,
            timeout_in_milliseconds=limits.timeout_in_milliseconds,
        )
        try:
            response = self._client(serve_url).render_media_on_lambda(params)
        except DeploymentError:
            raise
        except Exception as e:
            raise RenderFailedError(f"Could not start render: {e}") from e
        if not response:
            raise RenderFailedError("Render request returned no render id")
        return RenderHandle(response.render_id, response.bucket_name)

    def get_render_progress(self, handle: RenderHandle) -> RenderProgress:
        progress = self._client().get_render_progress(
            render_id=handle.render_id, bucket_name=handle.bucket_name
        )
        fatal = None
        if _field(progress, "fatalErrorEncountered", "fatal_error_encountered"):
            errors = _field(progress, "errors") or []
            fatal = _error_message(errors[0]) if errors else "Lambda render failed"

        output = None
        out_key = _field(progress, "outKey", "out_key")
        if out_key:
            out_bucket = _field(progress, "outBucket", "out_bucket") or handle.bucket_name
            output = ObjectLocation(out_bucket, out_key)

        return RenderProgress(
            overall_progress=float(_field(progress, "overallProgress", "overall_progress") or 0.0),
            done=bool(_field(progress, "done")),
            fatal_error=fatal,
            output=output,
        )

    # --- Storage ---

    def iter_object(self, location: ObjectLocation, chunk_size: int = 1024 * 1024) -> Iterator[bytes]:
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            body = self.s3.get_object(Bucket=location.bucket, Key=location.key)["Body"]
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Could not read s3://{location.bucket}/{location.key}: {e}") from e
        try:
            yield from body.iter_chunks(chunk_size=chunk_size)
        finally:
            body.close()

    def _run_cli(self, args: list[str]) -> str:
        cmd = [*self.config.remotion_command, *args, f"--region={self.config.region}"]
        logger.debug("[remotion] %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=str(Path(self.config.project_dir)),
                capture_output=True,
                text=True,
                timeout=self.cli_timeout,
            )
        except subprocess.TimeoutExpired:
            raise DeploymentError(f"Remotion CLI timed out after {self.cli_timeout}s: {' '.join(args[:3])}")
        except FileNotFoundError:
            raise DeploymentError(f"Remotion CLI not found: {self.config.remotion_command[0]}")

        if result.returncode != 0:
            error_msg = result.stderr or result.stdout or "Unknown error"
            raise DeploymentError(f"Remotion CLI failed ({' '.join(args[:3])}): {error_msg.strip()}")
        return result.stdout


def _field(obj: Any, *names: str) -> Any:
    for name in names:
        if isinstance(obj, dict) and name in obj:
            return obj[name]
        if hasattr(obj, name):
            return getattr(obj, name)
    return None


def _error_message(error: Any) -> str:
    return str(_field(error, "message") or error)
