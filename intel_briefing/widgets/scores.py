"""Live and recent scores from the ESPN scoreboard API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import time
from typing import Any, Callable, Literal

from ..cache import TimedCache
from ..config import AppConfig
from ..fetcher import HttpFetcher

logger = logging.getLogger(__name__)

SCOREBOARD_URL = "https://site.api.espn.com/apis/site/v2/sports/{sport}/{league}/scoreboard"

GameStatus = Literal["scheduled", "in_progress", "final", "postponed"]


@dataclass(frozen=True)
class League:
    key: str
    label: str
    sport: str
    league: str


LEAGUES = [
    League("nfl", "NFL", "football", "nfl"),
    League("nba", "NBA", "basketball", "nba"),
    League("mlb", "MLB", "baseball", "mlb"),
    League("nhl", "NHL", "hockey", "nhl"),
    League("mls", "MLS", "soccer", "usa.1"),
    League("nascar", "NASCAR", "racing", "nascar"),
    League("f1", "F1", "racing", "f1"),
]


@dataclass
class TeamInfo:
    name: str = ""
    abbr: str = ""
    logo: str = ""
    score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "abbr": self.abbr, "logo": self.logo, "score": self.score}


@dataclass
class GameScore:
    """One event on a league scoreboard.

    Racing events have no head-to-head competitors; they are carried as a
    home "team" named after the event and an empty away team.
    """
    id: str
    league: str
    home_team: TeamInfo
    away_team: TeamInfo = field(default_factory=TeamInfo)
    status: GameStatus = "scheduled"
    detail: str = ""
    start_time: str = ""
    event_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "league": self.league,
            "homeTeam": self.home_team.to_dict(),
            "awayTeam": self.away_team.to_dict(),
            "status": self.status,
            "detail": self.detail,
            "startTime": self.start_time,
            "eventName": self.event_name,
        }


def leagues_for(key: str) -> list[League]:
    """Resolve "all" or a single league key.

    Raises:
        ValueError: If the key names no known league
    """
    if key == "all":
        return list(LEAGUES)
    selected = [league for league in LEAGUES if league.key == key]
    if not selected:
        known = ", ".join(league.key for league in LEAGUES)
        raise ValueError(f"Invalid league: {key}. Supported: all, {known}")
    return selected


def parse_status(status: Any) -> GameStatus:
    status_type = (status or {}).get("type") or {}
    state = status_type.get("state")
    if state == "in":
        return "in_progress"
    if state == "post":
        return "final"
    if state == "pre":
        return "scheduled"
    if status_type.get("completed"):
        return "final"
    return "scheduled"


def parse_scoreboard(data: Any, league_key: str) -> list[GameScore]:
    """Parse an ESPN scoreboard payload; malformed events are skipped."""
    scores: list[GameScore] = []
    for index, event in enumerate((data or {}).get("events") or []):
        try:
            score = _parse_event(event, league_key, index)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.debug("Skipping malformed %s event: %s", league_key, exc)
            continue
        if score is not None:
            scores.append(score)
    return scores


def _parse_event(event: dict[str, Any], league_key: str, index: int) -> GameScore | None:
    competitions = event.get("competitions") or []
    event_status = event.get("status") or {}
    fallback_id = f"{league_key}-{index}"

    if not competitions:
        return GameScore(
            id=str(event.get("id") or fallback_id),
            league=league_key,
            home_team=TeamInfo(name=event.get("name") or "", abbr=league_key.upper()),
            status=parse_status(event_status),
            detail=(event_status.get("type") or {}).get("shortDetail") or event.get("name") or "",
            start_time=event.get("date") or "",
            event_name=event.get("name"),
        )

    competition = competitions[0]
    competitors = competition.get("competitors") or []
    home = next((c for c in competitors if c.get("homeAway") == "home"), None)
    away = next((c for c in competitors if c.get("homeAway") == "away"), None)
    if home is None and competitors:
        home = competitors[0]
    if away is None and len(competitors) > 1:
        away = competitors[1]
    if home is None:
        return None

    competition_status = competition.get("status") or {}
    return GameScore(
        id=str(event.get("id") or competition.get("id") or fallback_id),
        league=league_key,
        home_team=_team(home),
        away_team=_team(away) if away else TeamInfo(),
        status=parse_status(competition_status or event_status),
        detail=(
            (competition_status.get("type") or {}).get("shortDetail")
            or (event_status.get("type") or {}).get("shortDetail")
            or ""
        ),
        start_time=event.get("date") or competition.get("date") or "",
        event_name=event.get("name"),
    )


def _team(competitor: dict[str, Any]) -> TeamInfo:
    team = competitor.get("team") or {}
    return TeamInfo(
        name=team.get("displayName") or team.get("name") or "",
        abbr=team.get("abbreviation") or "",
        logo=team.get("logo") or "",
        score=_to_int(competitor.get("score")),
    )


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class ScoresService:
    """Cached scoreboards, one cache entry per league."""

    def __init__(self, http: HttpFetcher, cache: TimedCache[list[GameScore]]):
        self.http = http
        self.cache = cache

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        http: HttpFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> ScoresService:
        return cls(
            http or HttpFetcher(cfg.fetch),
            TimedCache(cfg.cache.scores_ttl_seconds, cfg.cache.max_entries, clock=clock),
        )

    async def scores(self, league: str = "all") -> list[GameScore]:
        """Return scores for one league or all of them, in league order.

        Raises:
            ValueError: If league is neither "all" nor a known league key
        """
        selected = leagues_for(league)
        results = await asyncio.gather(*(self._league_scores(item) for item in selected))
        return [score for batch in results for score in batch]

    async def _league_scores(self, league: League) -> list[GameScore]:
        cached, fresh = self.cache.get(league.key)
        if cached is not None and fresh:
            return cached

        url = SCOREBOARD_URL.format(sport=league.sport, league=league.league)
        result = await self.http.get_json(url)
        if not result.ok:
            logger.warning("ESPN %s fetch failed: %s", league.key, result.error)
            return []
        scores = parse_scoreboard(result.data, league.key)
        self.cache.set(league.key, scores)
        return scores
