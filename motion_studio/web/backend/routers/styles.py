"""Caption style listing router."""

from fastapi import APIRouter

from ..dependencies import OrchestratorDep
from ..models.responses import StylesResponse

router = APIRouter(prefix="/styles", tags=["styles"])


@router.get("", response_model=StylesResponse)
def list_styles(orchestrator: OrchestratorDep) -> StylesResponse:
    """List the caption styles accepted by the captions endpoint."""
    registry = orchestrator.registry
    return StylesResponse(styles=registry.ids(), default=registry.default)
