"""Unit tests for WagerRepository using MagicMock AsyncSession."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from src.sb_wager.infrastructure.persistence import WagerRepository
from tests.factories import ACCEPTOR, CREATOR, KICKOFF, NOW, make_row, make_wager


def _wager_row(**kwargs: Any) -> MagicMock:
    fields: dict[str, Any] = {
        "id": "wager-1",
        "creator_identity": CREATOR,
        "game_id": "401547001",
        "game_name": "Buffalo Bills @ Kansas City Chiefs",
        "game_date": KICKOFF,
        "league": "nfl",
        "chosen_side": "Kansas City Chiefs",
        "chosen_side_id": "12",
        "spread": -6.5,
        "max_stake": 50,
        "status": "open",
        "created_at": NOW,
        "creator_first_name": "Alice",
        "creator_last_name": "Smith",
        "result_id": None,
        "winning_side_id": None,
        "home_score": None,
        "away_score": None,
        "settled_at": None,
    }
    fields.update(kwargs)
    return make_row(**fields)


def _acceptance_row(**kwargs: Any) -> MagicMock:
    fields: dict[str, Any] = {
        "id": 7,
        "wager_id": "wager-1",
        "acceptor_identity": ACCEPTOR,
        "amount": 20,
        "accepted_at": NOW,
        "acceptor_first_name": "Bob",
        "acceptor_last_name": "Jones",
    }
    fields.update(kwargs)
    return make_row(**fields)


def _db_returning(*results: Any) -> MagicMock:
    db = MagicMock()
    db.execute = AsyncMock(side_effect=list(results))
    return db


def _one(row: Any) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


def _many(rows: list[Any]) -> MagicMock:
    result = MagicMock()
    result.fetchall.return_value = rows
    return result


class TestWagerRepository:
    async def test_get_wager_maps_row(self) -> None:
        db = _db_returning(_one(_wager_row()))
        wager = await WagerRepository().get_wager(db, "wager-1")

        assert wager is not None
        assert wager.spread == -6.5
        assert isinstance(wager.max_stake, float)
        assert wager.creator_name == "Alice Smith"
        assert db.execute.call_args.args[1] == {"wager_id": "wager-1"}

    async def test_get_wager_for_share_uses_locking_query(self) -> None:
        db = _db_returning(_one(_wager_row()))
        await WagerRepository().get_wager(db, "wager-1", for_share=True)
        assert "FOR SHARE" in str(db.execute.call_args.args[0])

    async def test_get_wager_missing(self) -> None:
        db = _db_returning(_one(None))
        assert await WagerRepository().get_wager(db, "nope") is None

    async def test_insert_wager_binds_fields(self) -> None:
        db = _db_returning(MagicMock())
        wager = make_wager()
        await WagerRepository().insert_wager(db, wager)
        params = db.execute.call_args.args[1]
        assert params["id"] == "wager-1"
        assert params["status"] == "open"
        assert params["max_stake"] == 50.0

    async def test_insert_acceptance_conflict_returns_none(self) -> None:
        db = _db_returning(_one(None))
        result = await WagerRepository().insert_acceptance(db, "wager-1", ACCEPTOR, 20.0, NOW)
        assert result is None
        assert "ON CONFLICT" in str(db.execute.call_args.args[0])

    async def test_insert_acceptance_returns_row(self) -> None:
        row = _acceptance_row(acceptor_first_name=None, acceptor_last_name=None)
        db = _db_returning(_one(row))
        acceptance = await WagerRepository().insert_acceptance(db, "wager-1", ACCEPTOR, 20.0, NOW)
        assert acceptance is not None
        assert acceptance.id == 7
        assert acceptance.amount == 20.0

    async def test_insert_result_conflict_returns_none(self) -> None:
        db = _db_returning(_one(None))
        assert await WagerRepository().insert_result(db, "wager-1", "12", 24, 17, NOW) is None

    async def test_mark_settled_guards_on_open(self) -> None:
        result = MagicMock()
        result.rowcount = 0
        db = _db_returning(result)
        assert await WagerRepository().mark_settled(db, "wager-1") is False
        assert db.execute.call_args.args[1]["open"] == "open"

    async def test_list_created_groups_acceptances(self) -> None:
        wagers = [_wager_row(id="w-2"), _wager_row(id="w-1", result_id=3, winning_side_id="12",
                                                   home_score=24, away_score=17, settled_at=NOW)]
        accs = [_acceptance_row(id=1, wager_id="w-1"), _acceptance_row(id=2, wager_id="w-1",
                                                                      acceptor_identity=CREATOR)]
        db = _db_returning(_many(wagers), _many(accs))

        created = await WagerRepository().list_created_by(db, CREATOR)

        assert [c.wager.id for c in created] == ["w-2", "w-1"]
        assert created[0].acceptances == []
        assert created[0].result is None
        assert [a.id for a in created[1].acceptances] == [1, 2]
        assert created[1].result is not None
        assert created[1].result.id == 3
        assert db.execute.await_args_list[1].args[1] == {"wager_ids": ["w-2", "w-1"]}

    async def test_list_created_empty_skips_acceptance_query(self) -> None:
        db = _db_returning(_many([]))
        assert await WagerRepository().list_created_by(db, CREATOR) == []
        assert db.execute.await_count == 1

    async def test_list_accepted_maps_joined_rows(self) -> None:
        row = _wager_row(
            acceptance_id=9,
            acceptor_identity=ACCEPTOR,
            amount=15,
            accepted_at=NOW,
            acceptor_first_name="Bob",
            acceptor_last_name="Jones",
        )
        db = _db_returning(_many([row]))

        accepted = await WagerRepository().list_accepted_by(db, ACCEPTOR)

        assert accepted[0].acceptance.id == 9
        assert accepted[0].acceptance.wager_id == "wager-1"
        assert accepted[0].acceptance.acceptor_name == "Bob Jones"
        assert accepted[0].wager.creator_name == "Alice Smith"
        assert accepted[0].result is None
