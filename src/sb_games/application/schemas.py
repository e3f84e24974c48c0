"""Pydantic schemas for the games listing."""

from src.sb_common.response import CamelModel
from src.sb_games.domain.models import ExternalGame, TeamSide


class TeamOut(CamelModel):
    id: str
    name: str
    abbreviation: str
    logo: str | None = None

    @classmethod
    def from_domain(cls, team: TeamSide) -> "TeamOut":
        return cls(id=team.id, name=team.name, abbreviation=team.abbreviation, logo=team.logo)


class GameOut(CamelModel):
    id: str
    league: str
    name: str
    home_team: TeamOut
    away_team: TeamOut
    date: str
    home_spread: float | None = None
    away_spread: float | None = None

    @classmethod
    def from_domain(cls, game: ExternalGame) -> "GameOut":
        return cls(
            id=game.id,
            league=game.league.value,
            name=game.name,
            home_team=TeamOut.from_domain(game.home),
            away_team=TeamOut.from_domain(game.away),
            date=game.date.isoformat(),
            home_spread=game.home_spread,
            away_spread=game.away_spread,
        )


class GamesResponse(CamelModel):
    games: list[GameOut]
