"""Tests for SettlementService against an in-memory wager store."""

from datetime import timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sb_common.enums import CoverOutcome
from src.sb_common.errors import (
    GameNotFinishedError,
    GameNotFoundError,
    InternalError,
    ProviderError,
    WagerNotFoundError,
)
from src.sb_settlement.application.schemas import SettleResponse
from src.sb_settlement.application.service import SettlementService
from src.sb_wager.domain.models import Acceptance, SettlementResult, Wager
from tests.factories import (
    NOW,
    OTHER_ACCEPTOR,
    make_acceptance,
    make_game,
    make_team,
    make_wager,
)


class InMemoryWagers:
    """The subset of WagerRepository that settlement touches."""

    def __init__(self, wager: Wager, acceptances: list[Acceptance]) -> None:
        self.wagers = {wager.id: wager}
        self.acceptances = {wager.id: list(acceptances)}
        self.results: dict[str, SettlementResult] = {}
        self.insert_result_calls = 0

    async def get_wager(self, db: Any, wager_id: str, for_share: bool = False) -> Wager | None:
        return self.wagers.get(wager_id)

    async def get_result(self, db: Any, wager_id: str) -> SettlementResult | None:
        return self.results.get(wager_id)

    async def insert_result(
        self,
        db: Any,
        wager_id: str,
        winning_side_id: str | None,
        home_score: int,
        away_score: int,
        settled_at: Any,
    ) -> SettlementResult | None:
        self.insert_result_calls += 1
        if wager_id in self.results:
            return None
        result = SettlementResult(
            len(self.results) + 1, wager_id, winning_side_id, home_score, away_score, settled_at
        )
        self.results[wager_id] = result
        return result

    async def mark_settled(self, db: Any, wager_id: str) -> bool:
        wager = self.wagers[wager_id]
        if wager.status != "open":
            return False
        wager.status = "settled"
        return True

    async def list_acceptances(self, db: Any, wager_id: str) -> list[Acceptance]:
        return list(self.acceptances.get(wager_id, []))


def _final_game(home: int | None = 24, away: int | None = 17, status: str = "status_final") -> Any:
    return make_game(
        status=status,
        home=make_team("12", "Kansas City Chiefs", "KC", home),
        away=make_team("2", "Buffalo Bills", "BUF", away),
    )


def _setup(
    spread: float = -6.5, game: Any = None
) -> tuple[SettlementService, InMemoryWagers, AsyncMock]:
    repo = InMemoryWagers(
        make_wager(spread=spread),
        [
            make_acceptance(id=1),
            make_acceptance(
                id=2,
                acceptor_identity=OTHER_ACCEPTOR,
                amount=35.0,
                acceptor_first_name="Carol",
                acceptor_last_name="Lee",
            ),
        ],
    )
    schedule = AsyncMock()
    schedule.resolve.return_value = _final_game() if game is None else game
    return SettlementService(schedule=schedule, repo=repo), repo, schedule  # type: ignore[arg-type]


class TestSettle:
    async def test_win_settles_and_derives_ious(self) -> None:
        svc, repo, _ = _setup(spread=-6.5)

        settlement = await svc.settle(MagicMock(), "wager-1", now=NOW)

        assert settlement.outcome is CoverOutcome.WIN
        assert settlement.result.winning_side_id == "12"
        assert (settlement.result.home_score, settlement.result.away_score) == (24, 17)
        assert [(i.debtor, i.creditor, i.amount) for i in settlement.ious] == [
            ("Bob Jones", "Alice Smith", 20.0),
            ("Carol Lee", "Alice Smith", 35.0),
        ]
        assert settlement.message == "Creator won!"
        assert repo.wagers["wager-1"].status == "settled"

    async def test_loss(self) -> None:
        svc, _, _ = _setup(spread=-7.5)
        settlement = await svc.settle(MagicMock(), "wager-1", now=NOW)
        assert settlement.outcome is CoverOutcome.LOSS
        assert settlement.result.winning_side_id == "2"
        assert all(i.debtor == "Alice Smith" for i in settlement.ious)

    async def test_push_stores_null_winner_and_no_ious(self) -> None:
        svc, repo, _ = _setup(spread=-7.0)
        settlement = await svc.settle(MagicMock(), "wager-1", now=NOW)
        assert settlement.outcome is CoverOutcome.PUSH
        assert repo.results["wager-1"].is_push
        assert settlement.ious == []
        assert repo.wagers["wager-1"].status == "settled"

    async def test_second_settle_replays_identically(self) -> None:
        svc, repo, schedule = _setup()
        db = MagicMock()

        first = await svc.settle(db, "wager-1", now=NOW)
        second = await svc.settle(db, "wager-1", now=NOW + timedelta(hours=1))

        assert second.already_settled
        assert second.message == "Wager already settled"
        assert second.result == first.result
        assert second.ious == first.ious
        assert repo.insert_result_calls == 1
        assert schedule.resolve.await_count == 1

        a = SettleResponse.from_domain(first).model_dump(by_alias=True)
        b = SettleResponse.from_domain(second).model_dump(by_alias=True)
        assert a["result"] == b["result"]
        assert a["ious"] == b["ious"]

    async def test_lost_race_replays_stored_result(self) -> None:
        svc, repo, _ = _setup()
        winner = SettlementResult(99, "wager-1", "12", 24, 17, NOW)

        original_get_result = repo.get_result
        reads = {"n": 0}

        async def get_result(db: Any, wager_id: str) -> SettlementResult | None:
            # First read sees nothing; the concurrent settler commits before our insert.
            reads["n"] += 1
            if reads["n"] == 1:
                repo.results[wager_id] = winner
                return None
            return await original_get_result(db, wager_id)

        repo.get_result = get_result  # type: ignore[method-assign]

        settlement = await svc.settle(MagicMock(), "wager-1", now=NOW)

        assert settlement.already_settled
        assert settlement.result is winner
        assert settlement.outcome is CoverOutcome.WIN
        assert repo.wagers["wager-1"].status == "open"

    async def test_wager_not_found(self) -> None:
        svc, _, _ = _setup()
        with pytest.raises(WagerNotFoundError):
            await svc.settle(MagicMock(), "missing")

    async def test_game_not_found(self) -> None:
        svc, repo, schedule = _setup()
        schedule.resolve.return_value = None
        with pytest.raises(GameNotFoundError):
            await svc.settle(MagicMock(), "wager-1")
        assert repo.results == {}
        assert repo.wagers["wager-1"].status == "open"

    async def test_game_not_finished(self) -> None:
        svc, repo, _ = _setup(game=_final_game(None, None, status="status_in_progress"))
        with pytest.raises(GameNotFinishedError):
            await svc.settle(MagicMock(), "wager-1")
        assert repo.results == {}

    async def test_final_without_scores_not_finished(self) -> None:
        svc, _, _ = _setup(game=_final_game(None, 17))
        with pytest.raises(GameNotFinishedError):
            await svc.settle(MagicMock(), "wager-1")

    async def test_provider_failure_propagates(self) -> None:
        svc, repo, schedule = _setup()
        schedule.resolve.side_effect = ProviderError("ESPN", "503 Service Unavailable")
        with pytest.raises(ProviderError):
            await svc.settle(MagicMock(), "wager-1")
        assert repo.wagers["wager-1"].status == "open"

    async def test_unknown_league(self) -> None:
        svc, repo, _ = _setup()
        repo.wagers["wager-1"].league = "mlb"
        with pytest.raises(InternalError):
            await svc.settle(MagicMock(), "wager-1")
