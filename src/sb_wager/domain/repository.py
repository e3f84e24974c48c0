"""Repository Protocol - dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_wager.domain.models import (
    Acceptance,
    AcceptedWager,
    CreatedWager,
    SettlementResult,
    Wager,
)


class WagerRepositoryProtocol(Protocol):
    async def insert_wager(self, db: AsyncSession, wager: Wager) -> Wager: ...

    async def get_wager(
        self, db: AsyncSession, wager_id: str, for_share: bool = False
    ) -> Wager | None: ...

    async def mark_settled(self, db: AsyncSession, wager_id: str) -> bool: ...

    async def insert_acceptance(
        self,
        db: AsyncSession,
        wager_id: str,
        acceptor_identity: str,
        amount: float,
        accepted_at: datetime,
    ) -> Acceptance | None: ...

    async def list_acceptances(self, db: AsyncSession, wager_id: str) -> list[Acceptance]: ...

    async def insert_result(
        self,
        db: AsyncSession,
        wager_id: str,
        winning_side_id: str | None,
        home_score: int,
        away_score: int,
        settled_at: datetime,
    ) -> SettlementResult | None: ...

    async def get_result(self, db: AsyncSession, wager_id: str) -> SettlementResult | None: ...

    async def list_created_by(self, db: AsyncSession, identity: str) -> list[CreatedWager]: ...

    async def list_accepted_by(self, db: AsyncSession, identity: str) -> list[AcceptedWager]: ...
