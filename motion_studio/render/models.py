"""Value types exchanged with the remote render backend."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BucketInfo:
    """The storage bucket renders are written to."""

    bucket_name: str
    already_existed: bool


@dataclass(frozen=True)
class FunctionInfo:
    """The remote render function."""

    function_name: str
    already_existed: bool


@dataclass(frozen=True)
class DeployedSite:
    """A bundle deployed for exactly one job."""

    site_name: str
    bucket_name: str
    serve_url: str


@dataclass(frozen=True)
class RenderLimits:
    """Per-render limits passed to remote compute."""

    timeout_in_milliseconds: int = 120_000
    frames_per_lambda: int = 20
    codec: str = "h264"


@dataclass(frozen=True)
class RenderHandle:
    """Identifies an in-flight remote render."""

    render_id: str
    bucket_name: str


@dataclass(frozen=True)
class ObjectLocation:
    """Location of an object in storage."""

    bucket: str
    key: str


@dataclass(frozen=True)
class RenderProgress:
    """One progress observation of a remote render."""

    overall_progress: float
    done: bool = False
    fatal_error: str | None = None
    output: ObjectLocation | None = None
