"""Tests for the ESPN scoreboard client using httpx.MockTransport."""

from typing import Any

import httpx
import pytest

from src.sb_common.enums import League
from src.sb_common.errors import ProviderError
from src.sb_games.infrastructure.espn_client import (
    ESPNOdds,
    ESPNScheduleClient,
    spreads_from_odds,
)

BASE = "https://espn.test/sports"


def _competitor(team_id: str, name: str, abbr: str, side: str, score: Any = None) -> dict:
    comp: dict[str, Any] = {
        "id": team_id,
        "homeAway": side,
        "team": {"id": team_id, "displayName": name, "abbreviation": abbr, "logo": None},
    }
    if score is not None:
        comp["score"] = score
    return comp


def _event(
    event_id: str = "401547001",
    status: str = "STATUS_SCHEDULED",
    odds: list[dict] | None = None,
    home_score: Any = None,
    away_score: Any = None,
) -> dict:
    return {
        "id": event_id,
        "date": "2026-10-18T17:00Z",
        "status": {"type": {"name": status, "state": "pre"}},
        "competitions": [
            {
                "competitors": [
                    _competitor("12", "Kansas City Chiefs", "KC", "home", home_score),
                    _competitor("2", "Buffalo Bills", "BUF", "away", away_score),
                ],
                "odds": odds or [],
            }
        ],
    }


def _client(handler: Any) -> ESPNScheduleClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ESPNScheduleClient(http, base_url=BASE)


class TestSpreadsFromOdds:
    def test_home_favorite(self) -> None:
        odds = [ESPNOdds.model_validate({"spread": -3.5, "homeTeamOdds": {"favorite": True}})]
        assert spreads_from_odds(odds) == (-3.5, 3.5)

    def test_away_favorite(self) -> None:
        odds = [ESPNOdds.model_validate({"spread": 3.5, "homeTeamOdds": {"favorite": False}})]
        assert spreads_from_odds(odds) == (3.5, -3.5)

    def test_no_odds(self) -> None:
        assert spreads_from_odds([]) == (None, None)

    def test_prefers_provider_38(self) -> None:
        odds = [
            ESPNOdds.model_validate({"provider": {"id": "1", "name": "Other"}, "spread": 7.0}),
            ESPNOdds.model_validate(
                {
                    "provider": {"id": "38", "name": "Caesars"},
                    "spread": -2.5,
                    "homeTeamOdds": {"favorite": True},
                }
            ),
        ]
        assert spreads_from_odds(odds) == (-2.5, 2.5)

    def test_prefers_consensus(self) -> None:
        odds = [
            ESPNOdds.model_validate({"provider": {"id": "1", "name": "Other"}, "spread": 7.0}),
            ESPNOdds.model_validate({"provider": {"id": "9", "name": "Consensus"}, "spread": 1.5}),
        ]
        assert spreads_from_odds(odds) == (1.5, -1.5)


class TestFetchLeagueGames:
    async def test_maps_events(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            odds = [{"spread": -6.5, "homeTeamOdds": {"favorite": True}}]
            return httpx.Response(200, json={"events": [_event(odds=odds)]})

        games = await _client(handler).fetch_league_games(League.NFL)

        assert seen == [f"{BASE}/football/nfl/scoreboard"]
        assert len(games) == 1
        game = games[0]
        assert game.id == "401547001"
        assert game.league is League.NFL
        assert game.is_upcoming
        assert game.home.name == "Kansas City Chiefs"
        assert game.away.abbreviation == "BUF"
        assert (game.home_spread, game.away_spread) == (-6.5, 6.5)
        assert game.name == "Buffalo Bills @ Kansas City Chiefs"

    async def test_nba_path(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json={"events": []})

        assert await _client(handler).fetch_league_games(League.NBA) == []
        assert seen == ["/sports/basketball/nba/scoreboard"]

    async def test_final_scores_parsed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            event = _event(status="STATUS_FINAL", home_score="24", away_score="17")
            return httpx.Response(200, json={"events": [event]})

        game = (await _client(handler).fetch_league_games(League.NFL))[0]
        assert game.is_completed
        assert (game.home.score, game.away.score) == (24, 17)

    async def test_zero_score_is_a_score(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            event = _event(status="STATUS_FINAL", home_score="0", away_score="3")
            return httpx.Response(200, json={"events": [event]})

        game = (await _client(handler).fetch_league_games(League.NFL))[0]
        assert game.home.score == 0

    async def test_skips_event_without_both_sides(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            broken = _event(event_id="bad")
            broken["competitions"][0]["competitors"].pop()
            return httpx.Response(200, json={"events": [broken, _event()]})

        games = await _client(handler).fetch_league_games(League.NFL)
        assert [g.id for g in games] == ["401547001"]

    async def test_skips_event_with_bad_date(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            broken = _event(event_id="bad")
            broken["date"] = "not-a-date"
            return httpx.Response(200, json={"events": [broken, _event()]})

        games = await _client(handler).fetch_league_games(League.NFL)
        assert [g.id for g in games] == ["401547001"]

    async def test_non_200_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        with pytest.raises(ProviderError):
            await _client(handler).fetch_league_games(League.NFL)

    async def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("boom", request=request)

        with pytest.raises(ProviderError):
            await _client(handler).fetch_league_games(League.NFL)

    async def test_malformed_payload_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"events": [{"id": "x"}]})

        with pytest.raises(ProviderError):
            await _client(handler).fetch_league_games(League.NFL)
