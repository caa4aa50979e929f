"""
Liveness endpoint for API v1.

Returns a static status together with the running API version.  It
does not touch the database and requires no authentication.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from payments_api.app.api.deps import get_settings
from payments_api.app.core.config import Settings
from payments_api.app.schemas.envelope import Envelope, envelope_response


router = APIRouter()


@router.get("/health", response_model=Envelope)
def health(settings: Settings = Depends(get_settings)) -> JSONResponse:
    return envelope_response(status.HTTP_200_OK, data={"status": "ok", "version": settings.api_version})
