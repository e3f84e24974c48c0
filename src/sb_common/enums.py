"""Global enums - must match DB CHECK constraints exactly."""

from enum import Enum


class League(str, Enum):
    NFL = "nfl"
    NBA = "nba"


class WagerStatus(str, Enum):
    OPEN = "open"
    SETTLED = "settled"


class CoverOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
