"""IOU derivation - never persisted, always recomputed from the ledger.

WIN:  each acceptor owes the creator their stake.
LOSS: the creator owes each acceptor their stake.
PUSH: nobody owes anything.
"""

from dataclasses import dataclass

from src.sb_common.enums import CoverOutcome
from src.sb_wager.domain.models import Acceptance


@dataclass(frozen=True)
class IOU:
    debtor: str
    creditor: str
    amount: float


def compute_ious(
    outcome: CoverOutcome, creator_name: str, acceptances: list[Acceptance]
) -> list[IOU]:
    if outcome is CoverOutcome.PUSH:
        return []
    ious: list[IOU] = []
    for acceptance in acceptances:
        if outcome is CoverOutcome.WIN:
            ious.append(IOU(acceptance.acceptor_name, creator_name, acceptance.amount))
        else:
            ious.append(IOU(creator_name, acceptance.acceptor_name, acceptance.amount))
    return ious
