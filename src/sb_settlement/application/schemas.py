"""Pydantic schemas for the settle endpoint."""

from src.sb_common.response import CamelModel
from src.sb_settlement.domain.ious import IOU
from src.sb_settlement.domain.models import Settlement
from src.sb_wager.application.schemas import ResultOut


class IOUOut(CamelModel):
    debtor: str
    creditor: str
    amount: float

    @classmethod
    def from_domain(cls, iou: IOU) -> "IOUOut":
        return cls(debtor=iou.debtor, creditor=iou.creditor, amount=iou.amount)


class SettleResponse(CamelModel):
    result: ResultOut
    outcome: str
    ious: list[IOUOut]
    message: str

    @classmethod
    def from_domain(cls, s: Settlement) -> "SettleResponse":
        return cls(
            result=ResultOut.from_domain(s.result),
            outcome=s.outcome.value,
            ious=[IOUOut.from_domain(i) for i in s.ious],
            message=s.message,
        )
