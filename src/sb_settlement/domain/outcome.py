"""Point-spread cover outcome.

The spread is a handicap added to the chosen side's margin (negative when
the chosen side is favored):

    actual_diff = chosen_score - opponent_score
    cover_diff  = actual_diff + spread
    cover_diff > 0 -> WIN, < 0 -> LOSS, == 0 -> PUSH

A -7 favorite winning 24-17 pushes; at -6.5 it covers, at -7.5 it does not.
Spreads come in half-point (or whole-point) increments and scores are
integers, so exact equality is a meaningful push boundary.
"""

from src.sb_common.enums import CoverOutcome
from src.sb_common.errors import GameNotFinishedError, InternalError
from src.sb_games.domain.models import ExternalGame
from src.sb_wager.domain.models import SettlementResult


def determine_cover_outcome(chosen_score: int, opponent_score: int, spread: float) -> CoverOutcome:
    cover_diff = (chosen_score - opponent_score) + spread
    if cover_diff > 0:
        return CoverOutcome.WIN
    if cover_diff < 0:
        return CoverOutcome.LOSS
    return CoverOutcome.PUSH


def settle_game(
    game: ExternalGame, chosen_side_id: str, spread: float
) -> tuple[CoverOutcome, str | None]:
    """Return (outcome, winning_side_id) for a completed game; None id on push."""
    home_score, away_score = game.home.score, game.away.score
    if home_score is None or away_score is None:
        raise GameNotFinishedError(game.id)

    if chosen_side_id == game.home.id:
        chosen_score, opponent_score, opponent_id = home_score, away_score, game.away.id
    elif chosen_side_id == game.away.id:
        chosen_score, opponent_score, opponent_id = away_score, home_score, game.home.id
    else:
        raise InternalError(f"Team {chosen_side_id} is not playing in game {game.id}")

    outcome = determine_cover_outcome(chosen_score, opponent_score, spread)
    if outcome is CoverOutcome.WIN:
        return outcome, chosen_side_id
    if outcome is CoverOutcome.LOSS:
        return outcome, opponent_id
    return outcome, None


def outcome_from_result(result: SettlementResult, chosen_side_id: str) -> CoverOutcome:
    """Recover the outcome of a stored result (used on idempotent replays)."""
    if result.winning_side_id is None:
        return CoverOutcome.PUSH
    if result.winning_side_id == chosen_side_id:
        return CoverOutcome.WIN
    return CoverOutcome.LOSS
