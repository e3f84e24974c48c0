"""WagerLedgerService - wager lifecycle and acceptance rules.

All DB operations use the injected AsyncSession. Write paths expect the
caller (router layer) to wrap them in `async with db.begin()` so that the
identity upsert and the insert commit or roll back together.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_common.datetime_utils import utc_now
from src.sb_common.enums import WagerStatus
from src.sb_common.errors import DuplicateAcceptanceError, ProviderError, WagerNotFoundError
from src.sb_games.application.service import ScheduleService, get_schedule_service
from src.sb_identity.application.service import IdentityService
from src.sb_identity.domain.phone import normalize_phone
from src.sb_wager.application.schemas import (
    AcceptedWagerOut,
    AcceptWagerRequest,
    CreatedWagerOut,
    CreateWagerRequest,
    MyWagersResponse,
    ResultOut,
    WagerDetailResponse,
    WagerOut,
)
from src.sb_wager.domain.models import Acceptance, Wager
from src.sb_wager.domain.repository import WagerRepositoryProtocol
from src.sb_wager.domain.rules import (
    check_chosen_side,
    check_game_not_started,
    check_max_stake,
    check_not_self_acceptance,
    check_stake,
    check_wager_open,
)
from src.sb_wager.infrastructure.persistence import WagerRepository

logger = logging.getLogger(__name__)

DEFAULT_SHARE_BASE_URL = "http://localhost:3000"


def share_link(wager_id: str, origin: str | None = None) -> str:
    base = settings.PUBLIC_BASE_URL or origin or DEFAULT_SHARE_BASE_URL
    return f"{base.rstrip('/')}/bet/{wager_id}"


class WagerLedgerService:
    def __init__(
        self,
        repo: WagerRepositoryProtocol | None = None,
        identities: IdentityService | None = None,
        games: ScheduleService | None = None,
    ) -> None:
        self._repo: WagerRepositoryProtocol = repo or WagerRepository()
        self._identities = identities or IdentityService()
        self._games = games

    async def _check_side_plays(self, req: CreateWagerRequest) -> None:
        """Reject a side id foreign to a listed game.

        Only games in the cached upcoming list are checked; an unlisted game
        or an unreachable feed lets the wager through unchecked.
        """
        if self._games is None:
            return
        try:
            upcoming = await self._games.list_upcoming(req.league)
        except ProviderError as exc:
            logger.warning("Side check skipped for game %s: %s", req.game_id, exc)
            return
        game = next((g for g in upcoming if g.id == req.game_id), None)
        if game is not None:
            check_chosen_side(req.chosen_side_id, game.home.id, game.away.id)

    async def open_wager(
        self, db: AsyncSession, req: CreateWagerRequest, now: datetime | None = None
    ) -> Wager:
        check_max_stake(req.max_stake)
        creator = normalize_phone(req.creator_phone)
        await self._check_side_plays(req)
        identity = await self._identities.register(
            db, creator, req.creator_first_name, req.creator_last_name
        )

        wager = Wager(
            id=str(uuid.uuid4()),
            creator_identity=creator,
            game_id=req.game_id,
            game_name=req.game_name,
            game_date=req.game_date,
            league=req.league.value,
            chosen_side=req.chosen_side,
            chosen_side_id=req.chosen_side_id,
            spread=req.spread,
            max_stake=req.max_stake,
            status=WagerStatus.OPEN.value,
            created_at=now or utc_now(),
            creator_first_name=identity.first_name,
            creator_last_name=identity.last_name,
        )
        await self._repo.insert_wager(db, wager)
        logger.info("Wager opened: id=%s game=%s", wager.id, wager.game_id)
        return wager

    async def accept(
        self,
        db: AsyncSession,
        wager_id: str,
        req: AcceptWagerRequest,
        now: datetime | None = None,
    ) -> Acceptance:
        now = now or utc_now()
        acceptor = normalize_phone(req.acceptor_phone)

        wager = await self._repo.get_wager(db, wager_id, for_share=True)
        if wager is None:
            raise WagerNotFoundError(wager_id)
        check_wager_open(wager)
        check_game_not_started(wager.game_date, now)
        check_stake(req.amount, wager.max_stake)
        check_not_self_acceptance(acceptor, wager.creator_identity)

        identity = await self._identities.register(
            db, acceptor, req.acceptor_first_name, req.acceptor_last_name
        )
        acceptance = await self._repo.insert_acceptance(db, wager_id, acceptor, req.amount, now)
        if acceptance is None:
            raise DuplicateAcceptanceError()

        acceptance.acceptor_first_name = identity.first_name
        acceptance.acceptor_last_name = identity.last_name
        logger.info("Wager accepted: id=%s amount=%s", wager_id, req.amount)
        return acceptance

    async def mark_settled(self, db: AsyncSession, wager_id: str) -> None:
        """Idempotent: a second call on a settled wager changes nothing."""
        await self._repo.mark_settled(db, wager_id)

    async def get_wager(self, db: AsyncSession, wager_id: str) -> WagerDetailResponse:
        wager = await self._repo.get_wager(db, wager_id)
        if wager is None:
            raise WagerNotFoundError(wager_id)
        result = await self._repo.get_result(db, wager_id)
        return WagerDetailResponse(
            wager=WagerOut.from_domain(wager),
            result=ResultOut.from_optional(result),
        )

    async def list_for_identity(self, db: AsyncSession, raw_identity: str) -> MyWagersResponse:
        identity = normalize_phone(raw_identity)
        created = await self._repo.list_created_by(db, identity)
        accepted = await self._repo.list_accepted_by(db, identity)
        return MyWagersResponse(
            created=[CreatedWagerOut.from_domain(c) for c in created],
            accepted=[AcceptedWagerOut.from_domain(a) for a in accepted],
        )


_service: WagerLedgerService | None = None


def get_ledger_service() -> WagerLedgerService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = WagerLedgerService(games=get_schedule_service())
    return _service
