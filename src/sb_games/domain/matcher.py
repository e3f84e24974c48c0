"""Match primary-provider games to secondary-provider spread quotes.

The providers share no ids, so a quote matches a game when both team names
match (case-insensitive substring, either direction) and the start times
are less than 24 hours apart. The first matching quote wins.
"""

from dataclasses import replace
from datetime import timedelta

from src.sb_games.domain.models import ExternalGame, GameSpread

MATCH_WINDOW = timedelta(hours=24)


def team_names_match(a: str, b: str) -> bool:
    a_low, b_low = a.lower(), b.lower()
    return a_low in b_low or b_low in a_low


def find_spread(game: ExternalGame, spreads: list[GameSpread]) -> GameSpread | None:
    for spread in spreads:
        if (
            team_names_match(spread.home_team, game.home.name)
            and team_names_match(spread.away_team, game.away.name)
            and abs(game.date - spread.commence_time) < MATCH_WINDOW
        ):
            return spread
    return None


def match_games_with_spreads(
    games: list[ExternalGame], spreads: list[GameSpread]
) -> dict[str, GameSpread]:
    """Return {game_id: spread} for every game with a matching quote."""
    matches: dict[str, GameSpread] = {}
    for game in games:
        spread = find_spread(game, spreads)
        if spread is not None:
            matches[game.id] = spread
    return matches


def apply_fallback_spreads(
    games: list[ExternalGame], matches: dict[str, GameSpread]
) -> list[ExternalGame]:
    """Fill missing spreads from matched quotes. Games are copied, never mutated."""
    merged: list[ExternalGame] = []
    for game in games:
        spread = matches.get(game.id)
        if game.has_spread or spread is None:
            merged.append(game)
        else:
            merged.append(
                replace(game, home_spread=spread.home_spread, away_spread=spread.away_spread)
            )
    return merged
