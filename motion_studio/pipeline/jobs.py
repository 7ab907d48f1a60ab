"""Render job records."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..errors import InvalidTransitionError


class JobStatus(str, Enum):
    """Status of a render job. ``done`` and ``error`` are terminal."""

    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


class JobKind(str, Enum):
    """What a job renders."""

    RENDER = "render"
    CAPTIONS = "captions"


@dataclass
class JobResult:
    """Outcome of a successful job.

    ``url`` is None when there was nothing to render (a caption job whose
    transcript came back empty).
    """

    url: str | None
    title: str = ""
    duration_seconds: float | None = None
    fps: int | None = None
    words: list[dict[str, Any]] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "url": self.url,
            "title": self.title,
            "duration_seconds": self.duration_seconds,
            "fps": self.fps,
        }
        if self.words is not None:
            data["words"] = self.words
        return data


@dataclass
class RenderJob:
    """A render job as seen by callers."""

    id: str
    kind: JobKind
    status: JobStatus = JobStatus.PROCESSING
    step: str = ""
    progress: float = 0.0
    result: JobResult | None = None
    error: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_terminal(self) -> bool:
        return self.status != JobStatus.PROCESSING

    def set_step(self, step: str, progress: float | None = None) -> None:
        if self.is_terminal:
            return
        self.step = step
        if progress is not None:
            self.progress = min(max(progress, 0.0), 1.0)
        self.updated_at = datetime.now()

    def mark_done(self, result: JobResult) -> None:
        self._check_open(JobStatus.DONE)
        self.status = JobStatus.DONE
        self.step = "Done"
        self.progress = 1.0
        self.result = result
        self.updated_at = datetime.now()

    def mark_error(self, message: str) -> None:
        self._check_open(JobStatus.ERROR)
        self.status = JobStatus.ERROR
        self.step = "Failed"
        self.error = message
        self.updated_at = datetime.now()

    def _check_open(self, target: JobStatus) -> None:
        if self.is_terminal:
            raise InvalidTransitionError(
                f"Job {self.id} is already {self.status.value}; cannot move to {target.value}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_id": self.id,
            "kind": self.kind.value,
            "status": self.status.value,
            "step": self.step,
            "progress": self.progress,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
