"""Identity API router.

POST /session - normalize a raw phone number into the identity token
"""

from fastapi import APIRouter, status

from src.sb_identity.application.schemas import SessionRequest, SessionResponse
from src.sb_identity.application.service import IdentityService

router = APIRouter(tags=["identity"])
_service = IdentityService()


@router.post(
    "/session",
    status_code=status.HTTP_200_OK,
    response_model=SessionResponse,
    response_model_by_alias=True,
    summary="Normalize identity",
)
async def open_session(body: SessionRequest) -> SessionResponse:
    return _service.open_session(body)
