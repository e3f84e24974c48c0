"""WagerRepository - concrete implementation of WagerRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Uniqueness of (wager, acceptor) and of the per-wager result is enforced by
the store: inserts use ON CONFLICT DO NOTHING ... RETURNING, and an empty
RETURNING means another transaction already holds the row.
"""

from collections import defaultdict
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.enums import WagerStatus
from src.sb_wager.domain.models import (
    Acceptance,
    AcceptedWager,
    CreatedWager,
    SettlementResult,
    Wager,
)

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_WAGER_COLUMNS = """
    w.id, w.creator_identity, w.game_id, w.game_name, w.game_date, w.league,
    w.chosen_side, w.chosen_side_id, w.spread, w.max_stake, w.status, w.created_at,
    u.first_name AS creator_first_name, u.last_name AS creator_last_name
"""

_RESULT_COLUMNS = """
    r.id AS result_id, r.winning_side_id, r.home_score, r.away_score, r.settled_at
"""

_INSERT_WAGER_SQL = text("""
    INSERT INTO wagers (id, creator_identity, game_id, game_name, game_date, league,
        chosen_side, chosen_side_id, spread, max_stake, status, created_at)
    VALUES (:id, :creator_identity, :game_id, :game_name, :game_date, :league,
        :chosen_side, :chosen_side_id, :spread, :max_stake, :status, :created_at)
""")

_GET_WAGER_SQL = text(f"""
    SELECT {_WAGER_COLUMNS}
    FROM wagers w
    JOIN users u ON u.identity = w.creator_identity
    WHERE w.id = :wager_id
""")

# Row share lock: serializes an acceptance against a concurrent settlement,
# whose status UPDATE needs an exclusive lock on the same row.
_GET_WAGER_FOR_SHARE_SQL = text(f"""
    SELECT {_WAGER_COLUMNS}
    FROM wagers w
    JOIN users u ON u.identity = w.creator_identity
    WHERE w.id = :wager_id
    FOR SHARE OF w
""")

_MARK_SETTLED_SQL = text("""
    UPDATE wagers
    SET status = :settled
    WHERE id = :wager_id AND status = :open
""")

_INSERT_ACCEPTANCE_SQL = text("""
    INSERT INTO acceptances (wager_id, acceptor_identity, amount, accepted_at)
    VALUES (:wager_id, :acceptor_identity, :amount, :accepted_at)
    ON CONFLICT (wager_id, acceptor_identity) DO NOTHING
    RETURNING id, wager_id, acceptor_identity, amount, accepted_at
""")

_LIST_ACCEPTANCES_SQL = text("""
    SELECT a.id, a.wager_id, a.acceptor_identity, a.amount, a.accepted_at,
           u.first_name AS acceptor_first_name, u.last_name AS acceptor_last_name
    FROM acceptances a
    JOIN users u ON u.identity = a.acceptor_identity
    WHERE a.wager_id = ANY(CAST(:wager_ids AS VARCHAR[]))
    ORDER BY a.accepted_at, a.id
""")

_INSERT_RESULT_SQL = text("""
    INSERT INTO results (wager_id, winning_side_id, home_score, away_score, settled_at)
    VALUES (:wager_id, :winning_side_id, :home_score, :away_score, :settled_at)
    ON CONFLICT (wager_id) DO NOTHING
    RETURNING id, wager_id, winning_side_id, home_score, away_score, settled_at
""")

_GET_RESULT_SQL = text("""
    SELECT id, wager_id, winning_side_id, home_score, away_score, settled_at
    FROM results
    WHERE wager_id = :wager_id
""")

_LIST_CREATED_SQL = text(f"""
    SELECT {_WAGER_COLUMNS}, {_RESULT_COLUMNS}
    FROM wagers w
    JOIN users u ON u.identity = w.creator_identity
    LEFT JOIN results r ON r.wager_id = w.id
    WHERE w.creator_identity = :identity
    ORDER BY w.created_at DESC, w.id
""")

_LIST_ACCEPTED_SQL = text(f"""
    SELECT {_WAGER_COLUMNS}, {_RESULT_COLUMNS},
           a.id AS acceptance_id, a.acceptor_identity, a.amount, a.accepted_at,
           au.first_name AS acceptor_first_name, au.last_name AS acceptor_last_name
    FROM acceptances a
    JOIN wagers w ON w.id = a.wager_id
    JOIN users u ON u.identity = w.creator_identity
    JOIN users au ON au.identity = a.acceptor_identity
    LEFT JOIN results r ON r.wager_id = w.id
    WHERE a.acceptor_identity = :identity
    ORDER BY a.accepted_at DESC, a.id DESC
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_wager(row: Any) -> Wager:
    return Wager(
        id=row.id,
        creator_identity=row.creator_identity,
        game_id=row.game_id,
        game_name=row.game_name,
        game_date=row.game_date,
        league=row.league,
        chosen_side=row.chosen_side,
        chosen_side_id=row.chosen_side_id,
        spread=float(row.spread),
        max_stake=float(row.max_stake),
        status=row.status,
        created_at=row.created_at,
        creator_first_name=row.creator_first_name,
        creator_last_name=row.creator_last_name,
    )


def _row_to_acceptance(row: Any) -> Acceptance:
    return Acceptance(
        id=row.id,
        wager_id=row.wager_id,
        acceptor_identity=row.acceptor_identity,
        amount=float(row.amount),
        accepted_at=row.accepted_at,
        acceptor_first_name=getattr(row, "acceptor_first_name", None),
        acceptor_last_name=getattr(row, "acceptor_last_name", None),
    )


def _row_to_result(row: Any) -> SettlementResult:
    return SettlementResult(
        id=row.id,
        wager_id=row.wager_id,
        winning_side_id=row.winning_side_id,
        home_score=row.home_score,
        away_score=row.away_score,
        settled_at=row.settled_at,
    )


def _joined_result(row: Any) -> SettlementResult | None:
    """Result columns from a LEFT JOIN; result_id is NULL when unsettled."""
    if row.result_id is None:
        return None
    return SettlementResult(
        id=row.result_id,
        wager_id=row.id,
        winning_side_id=row.winning_side_id,
        home_score=row.home_score,
        away_score=row.away_score,
        settled_at=row.settled_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class WagerRepository:
    async def insert_wager(self, db: AsyncSession, wager: Wager) -> Wager:
        await db.execute(
            _INSERT_WAGER_SQL,
            {
                "id": wager.id,
                "creator_identity": wager.creator_identity,
                "game_id": wager.game_id,
                "game_name": wager.game_name,
                "game_date": wager.game_date,
                "league": wager.league,
                "chosen_side": wager.chosen_side,
                "chosen_side_id": wager.chosen_side_id,
                "spread": wager.spread,
                "max_stake": wager.max_stake,
                "status": wager.status,
                "created_at": wager.created_at,
            },
        )
        return wager

    async def get_wager(
        self, db: AsyncSession, wager_id: str, for_share: bool = False
    ) -> Wager | None:
        sql = _GET_WAGER_FOR_SHARE_SQL if for_share else _GET_WAGER_SQL
        result = await db.execute(sql, {"wager_id": wager_id})
        row = result.fetchone()
        return _row_to_wager(row) if row else None

    async def mark_settled(self, db: AsyncSession, wager_id: str) -> bool:
        """open -> settled. Returns False when the wager was already settled."""
        result = await db.execute(
            _MARK_SETTLED_SQL,
            {
                "wager_id": wager_id,
                "settled": WagerStatus.SETTLED.value,
                "open": WagerStatus.OPEN.value,
            },
        )
        return result.rowcount == 1

    async def insert_acceptance(
        self,
        db: AsyncSession,
        wager_id: str,
        acceptor_identity: str,
        amount: float,
        accepted_at: datetime,
    ) -> Acceptance | None:
        result = await db.execute(
            _INSERT_ACCEPTANCE_SQL,
            {
                "wager_id": wager_id,
                "acceptor_identity": acceptor_identity,
                "amount": amount,
                "accepted_at": accepted_at,
            },
        )
        row = result.fetchone()
        return _row_to_acceptance(row) if row else None

    async def list_acceptances(self, db: AsyncSession, wager_id: str) -> list[Acceptance]:
        result = await db.execute(_LIST_ACCEPTANCES_SQL, {"wager_ids": [wager_id]})
        return [_row_to_acceptance(row) for row in result.fetchall()]

    async def insert_result(
        self,
        db: AsyncSession,
        wager_id: str,
        winning_side_id: str | None,
        home_score: int,
        away_score: int,
        settled_at: datetime,
    ) -> SettlementResult | None:
        result = await db.execute(
            _INSERT_RESULT_SQL,
            {
                "wager_id": wager_id,
                "winning_side_id": winning_side_id,
                "home_score": home_score,
                "away_score": away_score,
                "settled_at": settled_at,
            },
        )
        row = result.fetchone()
        return _row_to_result(row) if row else None

    async def get_result(self, db: AsyncSession, wager_id: str) -> SettlementResult | None:
        result = await db.execute(_GET_RESULT_SQL, {"wager_id": wager_id})
        row = result.fetchone()
        return _row_to_result(row) if row else None

    async def list_created_by(self, db: AsyncSession, identity: str) -> list[CreatedWager]:
        rows = (await db.execute(_LIST_CREATED_SQL, {"identity": identity})).fetchall()
        if not rows:
            return []

        wager_ids = [row.id for row in rows]
        acc_rows = (
            await db.execute(_LIST_ACCEPTANCES_SQL, {"wager_ids": wager_ids})
        ).fetchall()
        by_wager: dict[str, list[Acceptance]] = defaultdict(list)
        for acc_row in acc_rows:
            by_wager[acc_row.wager_id].append(_row_to_acceptance(acc_row))

        return [
            CreatedWager(
                wager=_row_to_wager(row),
                result=_joined_result(row),
                acceptances=by_wager.get(row.id, []),
            )
            for row in rows
        ]

    async def list_accepted_by(self, db: AsyncSession, identity: str) -> list[AcceptedWager]:
        rows = (await db.execute(_LIST_ACCEPTED_SQL, {"identity": identity})).fetchall()
        return [
            AcceptedWager(
                acceptance=Acceptance(
                    id=row.acceptance_id,
                    wager_id=row.id,
                    acceptor_identity=row.acceptor_identity,
                    amount=float(row.amount),
                    accepted_at=row.accepted_at,
                    acceptor_first_name=row.acceptor_first_name,
                    acceptor_last_name=row.acceptor_last_name,
                ),
                wager=_row_to_wager(row),
                result=_joined_result(row),
            )
            for row in rows
        ]
