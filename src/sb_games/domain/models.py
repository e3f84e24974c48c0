"""Canonical game shapes for sb_games - pure dataclasses.

Provider payloads are mapped into these in the infrastructure layer; the
rest of the system never sees provider-shaped data.
"""

from dataclasses import dataclass
from datetime import datetime

from src.sb_common.enums import League

UPCOMING_STATUSES: frozenset[str] = frozenset({"pre", "scheduled", "status_scheduled"})
COMPLETED_STATUSES: frozenset[str] = frozenset({"post", "final", "status_final"})


@dataclass(frozen=True)
class TeamSide:
    id: str
    name: str
    abbreviation: str
    logo: str | None = None
    score: int | None = None  # present once the provider reports one


@dataclass(frozen=True)
class ExternalGame:
    id: str
    league: League
    date: datetime
    status: str  # provider status name, lowercased
    home: TeamSide
    away: TeamSide
    home_spread: float | None = None
    away_spread: float | None = None

    @property
    def is_upcoming(self) -> bool:
        return self.status in UPCOMING_STATUSES

    @property
    def is_completed(self) -> bool:
        return self.status in COMPLETED_STATUSES

    @property
    def has_spread(self) -> bool:
        return self.home_spread is not None and self.away_spread is not None

    @property
    def name(self) -> str:
        return f"{self.away.name} @ {self.home.name}"


@dataclass(frozen=True)
class GameSpread:
    """A spread quote from the secondary provider, keyed by team names."""

    provider_game_id: str
    home_team: str
    away_team: str
    home_spread: float
    away_spread: float
    commence_time: datetime
