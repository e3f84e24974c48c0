"""SettlementService - idempotent open -> settled transition.

Flow (runs inside the caller's transaction):
  1. load wager                        (WagerNotFound)
  2. stored result? replay it          (idempotency hit)
  3. resolve the game from the feed    (GameNotFound / GameNotFinished)
  4. compute the cover outcome
  5. insert the result                 (ON CONFLICT: lost race -> replay)
  6. mark the wager settled
  7. derive IOUs from the acceptance list

IOUs are never stored; a replay rebuilds them from the stored result and
the same acceptance list, so every call returns the same result and IOUs.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.datetime_utils import utc_now
from src.sb_common.enums import League
from src.sb_common.errors import (
    GameNotFinishedError,
    GameNotFoundError,
    InternalError,
    WagerNotFoundError,
)
from src.sb_games.application.service import ScheduleService, get_schedule_service
from src.sb_settlement.domain.ious import compute_ious
from src.sb_settlement.domain.models import Settlement
from src.sb_settlement.domain.outcome import outcome_from_result, settle_game
from src.sb_wager.application.service import WagerLedgerService
from src.sb_wager.domain.models import SettlementResult, Wager
from src.sb_wager.domain.repository import WagerRepositoryProtocol
from src.sb_wager.infrastructure.persistence import WagerRepository

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        schedule: ScheduleService,
        repo: WagerRepositoryProtocol | None = None,
        ledger: WagerLedgerService | None = None,
    ) -> None:
        self._schedule = schedule
        self._repo: WagerRepositoryProtocol = repo or WagerRepository()
        self._ledger = ledger or WagerLedgerService(repo=self._repo)

    async def settle(
        self, db: AsyncSession, wager_id: str, now: datetime | None = None
    ) -> Settlement:
        wager = await self._repo.get_wager(db, wager_id)
        if wager is None:
            raise WagerNotFoundError(wager_id)

        existing = await self._repo.get_result(db, wager_id)
        if existing is not None:
            logger.info("Settlement idempotency hit: wager=%s", wager_id)
            return await self._replay(db, wager, existing)

        try:
            league = League(wager.league)
        except ValueError as exc:
            raise InternalError(f"Wager {wager_id} has unknown league {wager.league!r}") from exc

        game = await self._schedule.resolve(wager.game_id, league)
        if game is None:
            raise GameNotFoundError(wager.game_id)
        if not game.is_completed:
            raise GameNotFinishedError(wager.game_id)

        outcome, winning_side_id = settle_game(game, wager.chosen_side_id, wager.spread)

        result = await self._repo.insert_result(
            db,
            wager_id,
            winning_side_id,
            game.home.score,  # type: ignore[arg-type]  # checked by settle_game
            game.away.score,  # type: ignore[arg-type]
            now or utc_now(),
        )
        if result is None:
            stored = await self._repo.get_result(db, wager_id)
            if stored is None:
                raise InternalError(f"Settlement conflict without a stored result: {wager_id}")
            logger.info("Settlement race lost, replaying stored result: wager=%s", wager_id)
            return await self._replay(db, wager, stored)

        await self._ledger.mark_settled(db, wager_id)

        acceptances = await self._repo.list_acceptances(db, wager_id)
        ious = compute_ious(outcome, wager.creator_name, acceptances)
        logger.info(
            "Wager settled: id=%s outcome=%s score=%d-%d ious=%d",
            wager_id,
            outcome.value,
            result.home_score,
            result.away_score,
            len(ious),
        )
        return Settlement(result=result, outcome=outcome, ious=ious)

    async def _replay(
        self, db: AsyncSession, wager: Wager, result: SettlementResult
    ) -> Settlement:
        outcome = outcome_from_result(result, wager.chosen_side_id)
        acceptances = await self._repo.list_acceptances(db, wager.id)
        return Settlement(
            result=result,
            outcome=outcome,
            ious=compute_ious(outcome, wager.creator_name, acceptances),
            already_settled=True,
        )


_service: SettlementService | None = None


def get_settlement_service() -> SettlementService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = SettlementService(schedule=get_schedule_service())
    return _service
