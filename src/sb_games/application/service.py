"""ScheduleService - cached, merged view over the two game providers.

Upcoming games and secondary spreads are each cached per league key
("nfl", "nba", or "all") for a fixed TTL. A miss blocks the caller on the
provider round trip; a failed primary fetch propagates and leaves the
previous cache entry untouched. `resolve` never reads the cache: completed
games are filtered out of the upcoming list, and settlement needs final
scores straight from the feed.
"""

import asyncio
import logging
from collections.abc import Coroutine, Iterable
from typing import Any, TypeVar

from config.settings import settings
from src.sb_common.enums import League
from src.sb_common.errors import ProviderError
from src.sb_common.http_client import get_http_client
from src.sb_games.domain.cache import TTLCache
from src.sb_games.domain.matcher import apply_fallback_spreads, match_games_with_spreads
from src.sb_games.domain.models import ExternalGame, GameSpread
from src.sb_games.domain.providers import OddsProviderProtocol, ScheduleProviderProtocol
from src.sb_games.infrastructure.espn_client import ESPNScheduleClient
from src.sb_games.infrastructure.odds_api_client import OddsApiClient

logger = logging.getLogger(__name__)

ALL_LEAGUES_KEY = "all"

T = TypeVar("T")


def cache_key(league: League | None) -> str:
    return league.value if league is not None else ALL_LEAGUES_KEY


async def _fetch_all(calls: Iterable[Coroutine[Any, Any, list[T]]]) -> list[list[T]]:
    """Run per-league fetches concurrently, in call order.

    The first failure cancels and awaits the sibling fetches before it is
    re-raised unwrapped, so callers keep handling the provider's own error.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(call) for call in calls]
    except BaseExceptionGroup as group:
        raise group.exceptions[0] from None
    return [task.result() for task in tasks]


class ScheduleService:
    def __init__(
        self,
        schedule: ScheduleProviderProtocol,
        odds: OddsProviderProtocol | None = None,
        games_cache: TTLCache[list[ExternalGame]] | None = None,
        spreads_cache: TTLCache[list[GameSpread]] | None = None,
    ) -> None:
        self._schedule = schedule
        self._odds = odds
        self._games_cache: TTLCache[list[ExternalGame]] = games_cache or TTLCache(
            settings.GAMES_CACHE_TTL_SECONDS, name="games_cache"
        )
        self._spreads_cache: TTLCache[list[GameSpread]] = spreads_cache or TTLCache(
            settings.SPREADS_CACHE_TTL_SECONDS, name="spreads_cache"
        )

    @staticmethod
    def _leagues(league: League | None) -> list[League]:
        return [league] if league is not None else list(League)

    async def list_upcoming(self, league: League | None = None) -> list[ExternalGame]:
        """Not-yet-started games, ascending by start time. Cached per league key."""
        key = cache_key(league)
        cached = self._games_cache.get(key)
        if cached is not None:
            return cached

        batches = await _fetch_all(
            self._schedule.fetch_league_games(lg) for lg in self._leagues(league)
        )
        upcoming = [game for batch in batches for game in batch if game.is_upcoming]
        upcoming.sort(key=lambda g: g.date)

        self._games_cache.set(key, upcoming)
        return upcoming

    async def list_spreads(self, league: League | None = None) -> list[GameSpread]:
        """Secondary-provider quotes; [] when unconfigured or unreachable."""
        if self._odds is None or not self._odds.enabled:
            return []
        key = cache_key(league)
        cached = self._spreads_cache.get(key)
        if cached is not None:
            return cached

        try:
            batches = await _fetch_all(
                self._odds.fetch_league_spreads(lg) for lg in self._leagues(league)
            )
        except ProviderError as exc:
            logger.warning("Spread fallback unavailable, using primary spreads only: %s", exc)
            return []
        spreads = [quote for batch in batches for quote in batch]

        self._spreads_cache.set(key, spreads)
        return spreads

    async def list_games(self, league: League | None = None) -> list[ExternalGame]:
        """Upcoming games with missing spreads filled from the secondary provider."""
        games = await self.list_upcoming(league)
        missing = [g for g in games if not g.has_spread]
        if not missing:
            return list(games)
        spreads = await self.list_spreads(league)
        if not spreads:
            return list(games)
        return apply_fallback_spreads(games, match_games_with_spreads(missing, spreads))

    async def resolve(self, game_id: str, league: League) -> ExternalGame | None:
        """Authoritative lookup straight from the feed, including completed games."""
        games = await self._schedule.fetch_league_games(league)
        return next((g for g in games if g.id == game_id), None)


_service: ScheduleService | None = None


def get_schedule_service() -> ScheduleService:
    global _service  # noqa: PLW0603
    if _service is None:
        http = get_http_client()
        _service = ScheduleService(
            schedule=ESPNScheduleClient(http),
            odds=OddsApiClient(http),
        )
    return _service
