"""Pydantic response models for API endpoints."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from ....pipeline.jobs import RenderJob


class JobStartedResponse(BaseModel):
    """Response when a background job is accepted."""

    job_id: str
    status: Literal["processing"] = "processing"


class JobResultResponse(BaseModel):
    """Outcome of a finished job."""

    url: str | None
    title: str = ""
    duration_seconds: float | None = None
    fps: int | None = None
    words: list[dict[str, Any]] | None = None


class JobResponse(BaseModel):
    """Current state of a job."""

    job_id: str
    kind: Literal["render", "captions"]
    status: Literal["processing", "done", "error"]
    step: str = Field(description="Human-readable progress label")
    progress: float = Field(ge=0.0, le=1.0)
    result: JobResultResponse | None = None
    error: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_job(cls, job: RenderJob) -> "JobResponse":
        return cls.model_validate(job.to_dict())


class StylesResponse(BaseModel):
    """Available caption styles."""

    styles: list[str]
    default: str | None


class HealthResponse(BaseModel):
    """Liveness probe."""

    status: str = "ok"
    timestamp: datetime
