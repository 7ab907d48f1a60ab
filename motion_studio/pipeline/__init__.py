"""Render job records, storage and orchestration."""

from .jobs import JobKind, JobResult, JobStatus, RenderJob
from .store import InMemoryJobStore, JobStore
from .orchestrator import JobContext, JobOrchestrator

__all__ = [
    "InMemoryJobStore",
    "JobContext",
    "JobKind",
    "JobOrchestrator",
    "JobResult",
    "JobStatus",
    "JobStore",
    "RenderJob",
]
