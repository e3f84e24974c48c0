"""Settlement endpoint.

POST /wagers/{wager_id}/settle - settle against the final score (idempotent)
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.sb_common.database import DbSession
from src.sb_settlement.application.schemas import SettleResponse
from src.sb_settlement.application.service import SettlementService, get_settlement_service

router = APIRouter(prefix="/wagers", tags=["settlement"])


@router.post("/{wager_id}/settle", response_model=SettleResponse, response_model_by_alias=True)
async def settle_wager(
    wager_id: str,
    db: DbSession,
    settlement: Annotated[SettlementService, Depends(get_settlement_service)],
) -> SettleResponse:
    async with db.begin():
        result = await settlement.settle(db, wager_id)
    return SettleResponse.from_domain(result)
