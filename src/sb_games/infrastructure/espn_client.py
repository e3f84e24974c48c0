"""Primary schedule provider: the ESPN public scoreboard feed.

GET {ESPN_BASE_URL}/{sport}/{league}/scoreboard

The payload is validated into the ESPN* models below and then mapped to
ExternalGame. Spread sign: the favorite gets -|spread|, the other side
+|spread|. ESPN marks the favorite on homeTeamOdds; when the home side is
not marked as favorite the away side is treated as the favorite.
"""

import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from config.settings import settings
from src.sb_common.datetime_utils import parse_iso
from src.sb_common.enums import League
from src.sb_common.errors import ProviderError
from src.sb_games.domain.models import ExternalGame, TeamSide

logger = logging.getLogger(__name__)

PROVIDER_NAME = "ESPN"

SPORT_PATHS: dict[League, str] = {
    League.NFL: "football",
    League.NBA: "basketball",
}

# Caesars; otherwise any provider with "consensus" in its name
PREFERRED_ODDS_PROVIDER_ID = "38"


# ---------------------------------------------------------------------------
# Provider payload models
# ---------------------------------------------------------------------------


class _ESPNModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class ESPNTeam(_ESPNModel):
    id: str
    display_name: str
    abbreviation: str = ""
    logo: str | None = None


class ESPNCompetitor(_ESPNModel):
    id: str
    team: ESPNTeam
    home_away: str
    score: str | None = None


class ESPNOddsProvider(_ESPNModel):
    id: str = ""
    name: str = ""


class ESPNTeamOdds(_ESPNModel):
    favorite: bool | None = None
    underdog: bool | None = None


class ESPNOdds(_ESPNModel):
    provider: ESPNOddsProvider = ESPNOddsProvider()
    details: str | None = None
    spread: float | None = None
    home_team_odds: ESPNTeamOdds | None = None
    away_team_odds: ESPNTeamOdds | None = None


class ESPNCompetition(_ESPNModel):
    competitors: list[ESPNCompetitor]
    odds: list[ESPNOdds] = []


class ESPNStatusType(_ESPNModel):
    name: str
    state: str = ""


class ESPNStatus(_ESPNModel):
    type: ESPNStatusType


class ESPNEvent(_ESPNModel):
    id: str
    date: str
    status: ESPNStatus
    competitions: list[ESPNCompetition]


class ESPNScoreboard(_ESPNModel):
    events: list[ESPNEvent] = []


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


def _parse_score(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    return int(float(raw))


def _to_team_side(competitor: ESPNCompetitor) -> TeamSide:
    return TeamSide(
        id=competitor.team.id,
        name=competitor.team.display_name,
        abbreviation=competitor.team.abbreviation,
        logo=competitor.team.logo,
        score=_parse_score(competitor.score),
    )


def _preferred_odds(odds: list[ESPNOdds]) -> ESPNOdds | None:
    if not odds:
        return None
    for entry in odds:
        if (
            entry.provider.id == PREFERRED_ODDS_PROVIDER_ID
            or "consensus" in entry.provider.name.lower()
        ):
            return entry
    return odds[0]


def spreads_from_odds(odds: list[ESPNOdds]) -> tuple[float | None, float | None]:
    """Return (home_spread, away_spread) from the preferred odds entry."""
    entry = _preferred_odds(odds)
    if entry is None or entry.spread is None:
        return None, None
    magnitude = abs(entry.spread)
    home_favored = bool(entry.home_team_odds and entry.home_team_odds.favorite)
    if home_favored:
        return -magnitude, magnitude
    return magnitude, -magnitude


def event_to_game(event: ESPNEvent, league: League) -> ExternalGame | None:
    """Map one scoreboard event; None when the competition is malformed."""
    if not event.competitions:
        return None
    competition = event.competitions[0]
    home = next((c for c in competition.competitors if c.home_away == "home"), None)
    away = next((c for c in competition.competitors if c.home_away == "away"), None)
    if home is None or away is None:
        return None

    home_spread, away_spread = spreads_from_odds(competition.odds)
    return ExternalGame(
        id=event.id,
        league=league,
        date=parse_iso(event.date),
        status=event.status.type.name.lower(),
        home=_to_team_side(home),
        away=_to_team_side(away),
        home_spread=home_spread,
        away_spread=away_spread,
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class ESPNScheduleClient:
    """Implements ScheduleProviderProtocol against the ESPN scoreboard."""

    def __init__(self, http: httpx.AsyncClient, base_url: str | None = None) -> None:
        self._http = http
        self._base_url = (base_url or settings.ESPN_BASE_URL).rstrip("/")

    def scoreboard_url(self, league: League) -> str:
        return f"{self._base_url}/{SPORT_PATHS[league]}/{league.value}/scoreboard"

    async def fetch_league_games(self, league: League) -> list[ExternalGame]:
        url = self.scoreboard_url(league)
        logger.info("Fetching %s scoreboard: league=%s", PROVIDER_NAME, league.value)
        try:
            resp = await self._http.get(url)
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER_NAME, str(exc) or type(exc).__name__) from exc
        if resp.status_code != 200:
            raise ProviderError(PROVIDER_NAME, f"{resp.status_code} {resp.reason_phrase}")

        try:
            board = ESPNScoreboard.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ProviderError(PROVIDER_NAME, "malformed scoreboard payload") from exc

        games: list[ExternalGame] = []
        for event in board.events:
            try:
                game = event_to_game(event, league)
            except ValueError:
                game = None
            if game is None:
                logger.warning("Skipping malformed %s event %s", PROVIDER_NAME, event.id)
                continue
            games.append(game)
        return games
