"""Caption job router."""

import logging

from fastapi import APIRouter, HTTPException, status

from ....errors import JobQueueFullError, RequestValidationError
from ..dependencies import OrchestratorDep
from ..models.requests import CaptionsRequest
from ..models.responses import JobStartedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/captions", tags=["captions"])


@router.post("", response_model=JobStartedResponse, status_code=status.HTTP_202_ACCEPTED)
def add_captions(request: CaptionsRequest, orchestrator: OrchestratorDep) -> JobStartedResponse:
    """Start a caption job for a source video."""
    try:
        job_id = orchestrator.submit_captions(
            request.video_url,
            style=request.style,
            mode=request.mode,
            emoji_cues=request.emoji_cues,
        )
    except RequestValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except JobQueueFullError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    logger.info("[captions] Job %s: %s (style=%s)", job_id, request.video_url, request.style or "default")
    return JobStartedResponse(job_id=job_id)
