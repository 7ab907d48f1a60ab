"""Job status router."""

from fastapi import APIRouter, HTTPException, status

from ..dependencies import OrchestratorDep
from ..models.responses import JobResponse

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=list[JobResponse])
def list_jobs(orchestrator: OrchestratorDep) -> list[JobResponse]:
    """List jobs still inside the retention window, newest first."""
    return [JobResponse.from_job(job) for job in orchestrator.list_jobs()]


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, orchestrator: OrchestratorDep) -> JobResponse:
    """Get job status.

    Expired jobs are indistinguishable from jobs that never existed.
    """
    job = orchestrator.get_status(job_id)
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job not found: {job_id}",
        )
    return JobResponse.from_job(job)
