"""Job record storage."""

import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Callable

from .jobs import RenderJob


class JobStore(ABC):
    """Keyed storage for job records.

    Implementations must tolerate concurrent use from request handlers, job
    workers and the retention sweeper. Returned jobs are snapshots; mutate
    through :meth:`update`.
    """

    @abstractmethod
    def put(self, job: RenderJob) -> None:
        pass

    @abstractmethod
    def get(self, job_id: str) -> RenderJob | None:
        pass

    @abstractmethod
    def update(self, job_id: str, change: Callable[[RenderJob], None]) -> RenderJob | None:
        """Apply ``change`` to the stored job atomically.

        Returns:
            Snapshot after the change, or None if the job does not exist.
        """
        pass

    @abstractmethod
    def delete(self, job_id: str) -> bool:
        pass

    @abstractmethod
    def list(self) -> list[RenderJob]:
        pass

    @abstractmethod
    def sweep(self, max_age_seconds: float, now: datetime | None = None) -> int:
        """Evict jobs created more than ``max_age_seconds`` ago, in any state.

        Returns:
            Number of jobs removed.
        """
        pass


class InMemoryJobStore(JobStore):
    """Process-local job store guarded by a lock."""

    def __init__(self):
        self._jobs: dict[str, RenderJob] = {}
        self._lock = threading.Lock()

    def put(self, job: RenderJob) -> None:
        with self._lock:
            self._jobs[job.id] = replace(job)

    def get(self, job_id: str) -> RenderJob | None:
        with self._lock:
            job = self._jobs.get(job_id)
            return replace(job) if job else None

    def update(self, job_id: str, change: Callable[[RenderJob], None]) -> RenderJob | None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            change(job)
            return replace(job)

    def delete(self, job_id: str) -> bool:
        with self._lock:
            return self._jobs.pop(job_id, None) is not None

    def list(self) -> list[RenderJob]:
        with self._lock:
            jobs = [replace(job) for job in self._jobs.values()]
        return sorted(jobs, key=lambda j: j.created_at, reverse=True)

    def sweep(self, max_age_seconds: float, now: datetime | None = None) -> int:
        cutoff = now or datetime.now()
        with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if (cutoff - job.created_at).total_seconds() > max_age_seconds
            ]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
