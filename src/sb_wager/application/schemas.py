"""Pydantic schemas for sb_wager API requests and responses.

Amount-like inputs are deliberately unconstrained here: stake and max-stake
bounds are ledger rules with their own error kinds, not schema errors.
"""

from datetime import datetime, timezone

from pydantic import Field, field_validator

from src.sb_common.enums import League
from src.sb_common.response import CamelModel
from src.sb_wager.domain.models import (
    Acceptance,
    AcceptedWager,
    CreatedWager,
    SettlementResult,
    Wager,
)


def _iso(dt: datetime) -> str:
    return dt.isoformat()


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateWagerRequest(CamelModel):
    creator_phone: str = Field(..., min_length=1)
    creator_first_name: str = Field(..., min_length=1, max_length=100)
    creator_last_name: str = Field(..., min_length=1, max_length=100)
    game_id: str = Field(..., min_length=1)
    game_name: str = Field(..., min_length=1)
    game_date: datetime
    league: League
    chosen_side: str = Field(..., min_length=1)
    chosen_side_id: str = Field(..., min_length=1)
    spread: float = Field(..., allow_inf_nan=False)
    max_stake: float = Field(..., allow_inf_nan=False)

    @field_validator("game_date")
    @classmethod
    def game_date_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class AcceptWagerRequest(CamelModel):
    acceptor_phone: str = Field(..., min_length=1)
    acceptor_first_name: str = Field(..., min_length=1, max_length=100)
    acceptor_last_name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., allow_inf_nan=False)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class CreateWagerResponse(CamelModel):
    wager_id: str
    share_link: str


class WagerOut(CamelModel):
    id: str
    creator_identity: str
    creator_first_name: str | None
    creator_last_name: str | None
    game_id: str
    game_name: str
    game_date: str
    league: str
    chosen_side: str
    chosen_side_id: str
    spread: float
    max_stake: float
    status: str
    created_at: str

    @classmethod
    def from_domain(cls, w: Wager) -> "WagerOut":
        return cls(
            id=w.id,
            creator_identity=w.creator_identity,
            creator_first_name=w.creator_first_name,
            creator_last_name=w.creator_last_name,
            game_id=w.game_id,
            game_name=w.game_name,
            game_date=_iso(w.game_date),
            league=w.league,
            chosen_side=w.chosen_side,
            chosen_side_id=w.chosen_side_id,
            spread=w.spread,
            max_stake=w.max_stake,
            status=w.status,
            created_at=_iso(w.created_at),
        )


class ResultOut(CamelModel):
    id: int
    wager_id: str
    winning_side_id: str | None  # null on push
    home_score: int
    away_score: int
    settled_at: str

    @classmethod
    def from_domain(cls, r: SettlementResult) -> "ResultOut":
        return cls(
            id=r.id,
            wager_id=r.wager_id,
            winning_side_id=r.winning_side_id,
            home_score=r.home_score,
            away_score=r.away_score,
            settled_at=_iso(r.settled_at),
        )

    @classmethod
    def from_optional(cls, r: SettlementResult | None) -> "ResultOut | None":
        return cls.from_domain(r) if r is not None else None


class AcceptanceOut(CamelModel):
    id: int
    wager_id: str
    acceptor_identity: str
    acceptor_first_name: str | None = None
    acceptor_last_name: str | None = None
    amount: float
    accepted_at: str

    @classmethod
    def from_domain(cls, a: Acceptance) -> "AcceptanceOut":
        return cls(
            id=a.id,
            wager_id=a.wager_id,
            acceptor_identity=a.acceptor_identity,
            acceptor_first_name=a.acceptor_first_name,
            acceptor_last_name=a.acceptor_last_name,
            amount=a.amount,
            accepted_at=_iso(a.accepted_at),
        )


class WagerDetailResponse(CamelModel):
    wager: WagerOut
    result: ResultOut | None


class AcceptWagerResponse(CamelModel):
    success: bool = True
    acceptance: AcceptanceOut


class CreatedWagerOut(CamelModel):
    wager: WagerOut
    result: ResultOut | None
    acceptances: list[AcceptanceOut]

    @classmethod
    def from_domain(cls, c: CreatedWager) -> "CreatedWagerOut":
        return cls(
            wager=WagerOut.from_domain(c.wager),
            result=ResultOut.from_optional(c.result),
            acceptances=[AcceptanceOut.from_domain(a) for a in c.acceptances],
        )


class AcceptedWagerOut(CamelModel):
    acceptance: AcceptanceOut
    wager: WagerOut
    result: ResultOut | None

    @classmethod
    def from_domain(cls, a: AcceptedWager) -> "AcceptedWagerOut":
        return cls(
            acceptance=AcceptanceOut.from_domain(a.acceptance),
            wager=WagerOut.from_domain(a.wager),
            result=ResultOut.from_optional(a.result),
        )


class MyWagersResponse(CamelModel):
    created: list[CreatedWagerOut]
    accepted: list[AcceptedWagerOut]
