"""Domain models for sb_settlement."""

from dataclasses import dataclass, field

from src.sb_common.enums import CoverOutcome
from src.sb_settlement.domain.ious import IOU
from src.sb_wager.domain.models import SettlementResult

OUTCOME_MESSAGES: dict[CoverOutcome, str] = {
    CoverOutcome.WIN: "Creator won!",
    CoverOutcome.LOSS: "Acceptors won!",
    CoverOutcome.PUSH: "Push - exact spread, no winner",
}
ALREADY_SETTLED_MESSAGE = "Wager already settled"


@dataclass
class Settlement:
    result: SettlementResult
    outcome: CoverOutcome
    ious: list[IOU] = field(default_factory=list)
    already_settled: bool = False

    @property
    def message(self) -> str:
        if self.already_settled:
            return ALREADY_SETTLED_MESSAGE
        return OUTCOME_MESSAGES[self.outcome]
