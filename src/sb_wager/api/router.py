"""sb_wager REST endpoints.

POST /wagers                    - open a wager, returns id + share link
GET  /wagers/{wager_id}         - wager with creator name and result
POST /wagers/{wager_id}/accept  - record an acceptance
GET  /my-wagers?identity=       - wagers created and accepted by an identity
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.sb_common.database import DbSession
from src.sb_wager.application.schemas import (
    AcceptanceOut,
    AcceptWagerRequest,
    AcceptWagerResponse,
    CreateWagerRequest,
    CreateWagerResponse,
    MyWagersResponse,
    WagerDetailResponse,
)
from src.sb_wager.application.service import (
    WagerLedgerService,
    get_ledger_service,
    share_link,
)

router = APIRouter(prefix="/wagers", tags=["wagers"])
my_wagers_router = APIRouter(tags=["wagers"])


@router.post("", response_model=CreateWagerResponse, response_model_by_alias=True)
async def create_wager(
    body: CreateWagerRequest,
    request: Request,
    db: DbSession,
    ledger: Annotated[WagerLedgerService, Depends(get_ledger_service)],
) -> CreateWagerResponse:
    async with db.begin():
        wager = await ledger.open_wager(db, body)
    return CreateWagerResponse(
        wager_id=wager.id,
        share_link=share_link(wager.id, request.headers.get("origin")),
    )


@router.get("/{wager_id}", response_model=WagerDetailResponse, response_model_by_alias=True)
async def get_wager(
    wager_id: str,
    db: DbSession,
    ledger: Annotated[WagerLedgerService, Depends(get_ledger_service)],
) -> WagerDetailResponse:
    return await ledger.get_wager(db, wager_id)


@router.post(
    "/{wager_id}/accept", response_model=AcceptWagerResponse, response_model_by_alias=True
)
async def accept_wager(
    wager_id: str,
    body: AcceptWagerRequest,
    db: DbSession,
    ledger: Annotated[WagerLedgerService, Depends(get_ledger_service)],
) -> AcceptWagerResponse:
    async with db.begin():
        acceptance = await ledger.accept(db, wager_id, body)
    return AcceptWagerResponse(success=True, acceptance=AcceptanceOut.from_domain(acceptance))


@my_wagers_router.get("/my-wagers", response_model=MyWagersResponse, response_model_by_alias=True)
async def my_wagers(
    db: DbSession,
    ledger: Annotated[WagerLedgerService, Depends(get_ledger_service)],
    identity: str = Query(..., min_length=1, description="Phone number / identity token"),
) -> MyWagersResponse:
    return await ledger.list_for_identity(db, identity)
