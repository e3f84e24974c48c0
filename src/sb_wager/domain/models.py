"""Domain models for sb_wager - pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.sb_common.enums import WagerStatus
from src.sb_common.formatting import display_name


@dataclass
class Wager:
    id: str
    creator_identity: str
    game_id: str
    game_name: str
    game_date: datetime
    league: str
    chosen_side: str
    chosen_side_id: str
    spread: float  # negative favors the chosen side
    max_stake: float
    status: str
    created_at: datetime
    # Joined from users on read
    creator_first_name: str | None = None
    creator_last_name: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status == WagerStatus.OPEN.value

    @property
    def creator_name(self) -> str:
        return display_name(self.creator_first_name or "", self.creator_last_name or "")


@dataclass
class Acceptance:
    id: int
    wager_id: str
    acceptor_identity: str
    amount: float
    accepted_at: datetime
    # Joined from users on read
    acceptor_first_name: str | None = None
    acceptor_last_name: str | None = None

    @property
    def acceptor_name(self) -> str:
        return display_name(self.acceptor_first_name or "", self.acceptor_last_name or "")


@dataclass
class SettlementResult:
    id: int
    wager_id: str
    winning_side_id: str | None  # None = push
    home_score: int
    away_score: int
    settled_at: datetime

    @property
    def is_push(self) -> bool:
        return self.winning_side_id is None


@dataclass
class CreatedWager:
    """Creator's view: the wager, its result, and every acceptance in order."""

    wager: Wager
    result: SettlementResult | None
    acceptances: list[Acceptance]


@dataclass
class AcceptedWager:
    """Acceptor's view: their own acceptance joined with the wager and result."""

    acceptance: Acceptance
    wager: Wager
    result: SettlementResult | None
