"""Secondary odds provider: The Odds API (spreads market only).

GET {ODDS_API_BASE_URL}/{sport_key}/odds?regions=us&markets=spreads&oddsFormat=american

Only consulted when the primary feed has no spread for a game. The first
bookmaker's spreads market is used; quotes missing either side's point
are dropped. Failures raise ProviderError; callers decide whether that is
fatal (it is not for the games listing).
"""

import logging

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from config.settings import settings
from src.sb_common.datetime_utils import parse_iso
from src.sb_common.enums import League
from src.sb_common.errors import ProviderError
from src.sb_games.domain.models import GameSpread

logger = logging.getLogger(__name__)

PROVIDER_NAME = "The Odds API"

SPORT_KEYS: dict[League, str] = {
    League.NFL: "americanfootball_nfl",
    League.NBA: "basketball_nba",
}

_PLACEHOLDER_KEYS = frozenset({"", "your_api_key_here"})


# ---------------------------------------------------------------------------
# Provider payload models
# ---------------------------------------------------------------------------


class OddsOutcome(BaseModel):
    name: str
    price: float | None = None
    point: float | None = None


class OddsMarket(BaseModel):
    key: str
    outcomes: list[OddsOutcome] = []


class OddsBookmaker(BaseModel):
    key: str
    title: str = ""
    markets: list[OddsMarket] = []


class OddsEvent(BaseModel):
    id: str
    sport_key: str = ""
    commence_time: str
    home_team: str
    away_team: str
    bookmakers: list[OddsBookmaker] = []


_EVENTS_ADAPTER = TypeAdapter(list[OddsEvent])


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------


def event_to_spread(event: OddsEvent) -> GameSpread | None:
    if not event.bookmakers:
        return None
    market = next((m for m in event.bookmakers[0].markets if m.key == "spreads"), None)
    if market is None:
        return None
    home = next((o for o in market.outcomes if o.name == event.home_team), None)
    away = next((o for o in market.outcomes if o.name == event.away_team), None)
    if home is None or away is None or home.point is None or away.point is None:
        return None
    return GameSpread(
        provider_game_id=event.id,
        home_team=event.home_team,
        away_team=event.away_team,
        home_spread=home.point,
        away_spread=away.point,
        commence_time=parse_iso(event.commence_time),
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class OddsApiClient:
    """Implements OddsProviderProtocol against The Odds API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self._http = http
        self._api_key = api_key if api_key is not None else settings.ODDS_API_KEY
        self._base_url = (base_url or settings.ODDS_API_BASE_URL).rstrip("/")

    @property
    def enabled(self) -> bool:
        return self._api_key is not None and self._api_key not in _PLACEHOLDER_KEYS

    async def fetch_league_spreads(self, league: League) -> list[GameSpread]:
        if not self.enabled:
            return []
        url = f"{self._base_url}/{SPORT_KEYS[league]}/odds"
        params = {
            "apiKey": self._api_key,
            "regions": "us",
            "markets": "spreads",
            "oddsFormat": "american",
        }
        logger.info("Fetching %s spreads: league=%s", PROVIDER_NAME, league.value)
        try:
            resp = await self._http.get(url, params=params)
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER_NAME, str(exc) or type(exc).__name__) from exc
        if resp.status_code != 200:
            raise ProviderError(PROVIDER_NAME, f"{resp.status_code} {resp.reason_phrase}")

        remaining = resp.headers.get("x-requests-remaining")
        if remaining is not None:
            logger.debug("%s quota remaining: %s", PROVIDER_NAME, remaining)

        try:
            events = _EVENTS_ADAPTER.validate_python(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ProviderError(PROVIDER_NAME, "malformed odds payload") from exc

        spreads: list[GameSpread] = []
        for event in events:
            try:
                spread = event_to_spread(event)
            except ValueError:
                logger.warning(
                    "Skipping %s event %s: bad commence_time %r",
                    PROVIDER_NAME,
                    event.id,
                    event.commence_time,
                )
                continue
            if spread is not None:
                spreads.append(spread)
        return spreads
