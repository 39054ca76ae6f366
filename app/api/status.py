"""Status endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.auth import get_directory
from app.core.config import settings
from app.schemas.status import StatusResponse
from app.services.directory import IdentityDirectory
from app.services.profiles import utc_now_iso

router = APIRouter()


@router.get("/status", response_model=StatusResponse)
def get_status(
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
) -> StatusResponse:
    """Liveness payload for load balancers and the login page."""
    return StatusResponse(
        status="Cromwell Pay API running",
        timestamp=utc_now_iso(),
        version=settings.APP_VERSION,
        directory=directory.name,
    )
