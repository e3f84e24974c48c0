"""Wager preconditions; acceptance checks run in this order in the ledger.

Each rule raises its own error kind. Duplicate acceptance is not checked
here: the (wager_id, acceptor_identity) unique constraint is the guard.
"""

from datetime import datetime

from src.sb_common.errors import (
    GameStartedError,
    InvalidStakeError,
    SelfAcceptanceError,
    ValidationError,
    WagerClosedError,
)
from src.sb_common.formatting import format_amount
from src.sb_wager.domain.models import Wager


def check_max_stake(max_stake: float) -> None:
    if not max_stake > 0:
        raise ValidationError("Max stake must be greater than 0")


def check_wager_open(wager: Wager) -> None:
    if not wager.is_open:
        raise WagerClosedError(wager.id)


def check_game_not_started(game_date: datetime, now: datetime) -> None:
    """The wager locks the instant the scheduled start passes."""
    if not game_date > now:
        raise GameStartedError()


def check_stake(amount: float, max_stake: float) -> None:
    if not amount > 0:
        raise InvalidStakeError("amount must be greater than 0")
    if amount > max_stake:
        raise InvalidStakeError(f"amount cannot exceed max stake of {format_amount(max_stake)}")


def check_not_self_acceptance(acceptor_identity: str, creator_identity: str) -> None:
    if acceptor_identity == creator_identity:
        raise SelfAcceptanceError()


def check_chosen_side(chosen_side_id: str, home_id: str, away_id: str) -> None:
    if chosen_side_id not in (home_id, away_id):
        raise ValidationError("Chosen side is not playing in this game")
