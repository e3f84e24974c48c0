"""Provider Protocols - dependency inversion for testability.

Unit tests inject fakes that conform to these Protocols.
Infrastructure layer provides the real HTTP clients.
"""

from typing import Protocol

from src.sb_common.enums import League
from src.sb_games.domain.models import ExternalGame, GameSpread


class ScheduleProviderProtocol(Protocol):
    async def fetch_league_games(self, league: League) -> list[ExternalGame]: ...


class OddsProviderProtocol(Protocol):
    @property
    def enabled(self) -> bool: ...

    async def fetch_league_spreads(self, league: League) -> list[GameSpread]: ...
