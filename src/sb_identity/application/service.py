"""Identity Registry service: normalize phone input, upsert display names.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_identity.application.schemas import SessionRequest, SessionResponse
from src.sb_identity.domain.models import Identity
from src.sb_identity.domain.phone import normalize_phone
from src.sb_identity.infrastructure.persistence import IdentityRepository


class IdentityService:
    """Stateless service - instantiate once, reuse across requests."""

    def __init__(self, repo: IdentityRepository | None = None) -> None:
        self._repo = repo or IdentityRepository()

    def open_session(self, req: SessionRequest) -> SessionResponse:
        """Validate a client session; nothing is persisted until the user acts."""
        return SessionResponse(
            normalized_identity=normalize_phone(req.phone_number),
            first_name=req.first_name,
            last_name=req.last_name,
        )

    async def register(
        self, db: AsyncSession, identity: str, first_name: str, last_name: str
    ) -> Identity:
        """Create the user on first interaction, refresh the name afterwards."""
        return await self._repo.upsert(db, identity, first_name, last_name)
