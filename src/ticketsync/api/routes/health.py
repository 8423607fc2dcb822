"""Health check endpoint."""

from fastapi import APIRouter

from ticketsync.api.dependencies import OrchestratorDep
from ticketsync.api.models import APIResponse, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=APIResponse[HealthResponse])
def health(orchestrator: OrchestratorDep) -> APIResponse[HealthResponse]:
    """Report whether the service is up and fully configured."""
    missing = orchestrator.config.missing_fields()
    return APIResponse(
        data=HealthResponse(status="ok", configured=not missing, missing=missing)
    )
