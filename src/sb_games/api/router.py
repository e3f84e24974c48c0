"""sb_games REST endpoints.

GET /games?league=   - upcoming games with spreads (primary, else matched fallback)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.sb_common.enums import League
from src.sb_games.application.schemas import GameOut, GamesResponse
from src.sb_games.application.service import ScheduleService, get_schedule_service

router = APIRouter(prefix="/games", tags=["games"])


@router.get("", response_model=GamesResponse, response_model_by_alias=True)
async def list_games(
    schedule: Annotated[ScheduleService, Depends(get_schedule_service)],
    league: League | None = Query(None, description="nfl or nba; omit for both"),
) -> GamesResponse:
    games = await schedule.list_games(league)
    return GamesResponse(games=[GameOut.from_domain(g) for g in games])
