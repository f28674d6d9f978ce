# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Access. Token verification endpoint."""
from fastapi import APIRouter, Depends

from app.schemas.rota import AccessVerifyRequest
from app.services.access_service import AccessService
from app.core.dependencies import get_access_service

router = APIRouter(prefix="/api/v1", tags=["Auth"])


@router.post("/auth/verify")
def verify_token(
    payload: AccessVerifyRequest,
    service: AccessService = Depends(get_access_service),
):
    return {"valid": service.validate_token(payload.token), "required": service.enabled}
