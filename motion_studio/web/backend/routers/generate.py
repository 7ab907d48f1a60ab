"""Prompt-to-video router."""

import logging

from fastapi import APIRouter, HTTPException, status

from ....errors import JobQueueFullError, RequestValidationError
from ..dependencies import OrchestratorDep
from ..models.requests import GenerateRequest
from ..models.responses import JobStartedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate", tags=["generate"])


@router.post("", response_model=JobStartedResponse, status_code=status.HTTP_202_ACCEPTED)
def generate(request: GenerateRequest, orchestrator: OrchestratorDep) -> JobStartedResponse:
    """Start a video generation job."""
    try:
        job_id = orchestrator.submit_render(request.prompt, style=request.style, brand=request.brand)
    except RequestValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except JobQueueFullError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    logger.info("[generate] Job %s: %s", job_id, request.prompt[:80])
    return JobStartedResponse(job_id=job_id)
