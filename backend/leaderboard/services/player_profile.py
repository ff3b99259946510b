"""
Leaderboard and player profile.

Ratings are produced upstream by the rating job and stored as JSON blobs on
players (current rating) and event participations (rating after that event);
only their ``ordinal`` is shown here.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

from sqlmodel import Session, select

from leaderboard.models.event import Event
from leaderboard.models.event_participation import EventParticipation
from leaderboard.models.game import Game
from leaderboard.models.game_participation import GameParticipation
from leaderboard.models.player import Player, rating_ordinal
from leaderboard.services.record_loader import load_players_by_id
from leaderboard.services.rivalry import (
    NemesisRecord,
    OpponentGameResult,
    OwnGameResult,
    compute_nemeses,
)
from leaderboard.utils.display import get_numeric_date, remove_year_from_event_name
from leaderboard.utils.sql import chunked

logger = logging.getLogger(__name__)

DEFAULT_RATING = 1200


@dataclass
class LeaderboardRow:
    rank: int
    player_id: int
    username: str
    rating: Optional[int]


@dataclass
class EventHistoryEntry:
    event_id: int
    name: Optional[str]
    display_name: str
    start_date: Optional[date]
    games_won: int
    rating: Optional[int]
    rating_event: bool


@dataclass
class RatingPoint:
    id: int
    name: str
    full_name: str
    date: str
    timestamp: int
    rating: int


@dataclass
class PlayerProfile:
    player_id: int
    username: str
    rating: Optional[int]
    wins: int
    tournaments: int
    most_recent_event: Optional[EventHistoryEntry]
    events: List[EventHistoryEntry] = field(default_factory=list)
    rating_history: List[RatingPoint] = field(default_factory=list)
    nemeses: List[NemesisRecord] = field(default_factory=list)


def round_rating(value: Optional[float]) -> Optional[int]:
    """Round half up, the way the rating has always been displayed."""
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def is_rating_event(event: Optional[Event]) -> bool:
    """Only three and four player rating events feed the tournament rating."""
    if event is None:
        return False
    return event.rating_event is True and (event.num_players_per_game or 0) > 2


def get_leaderboard(session: Session) -> List[LeaderboardRow]:
    players = session.exec(select(Player)).all()

    def sort_key(player: Player):
        ordinal = rating_ordinal(player.current_rating)
        return (ordinal is None, -(ordinal or 0.0), player.username.lower())

    ranked = sorted(players, key=sort_key)
    return [
        LeaderboardRow(
            rank=index + 1,
            player_id=player.id,
            username=player.username,
            rating=round_rating(rating_ordinal(player.current_rating)),
        )
        for index, player in enumerate(ranked)
    ]


# ── Rivals ───────────────────────────────────────────────────────────────

def load_rivalry_inputs(
    session: Session, player_id: int
) -> Tuple[List[OwnGameResult], List[OpponentGameResult]]:
    own_rows = session.exec(select(GameParticipation).where(GameParticipation.player_id == player_id)).all()
    own = [OwnGameResult(game_id=row.game_id, ranking=row.ranking) for row in own_rows]

    opponents: List[OpponentGameResult] = []
    for batch in chunked(sorted({r.game_id for r in own})):
        rows = session.exec(
            select(GameParticipation, Game.created_at)
            .join(Game, Game.id == GameParticipation.game_id)
            .where(GameParticipation.game_id.in_(batch), GameParticipation.player_id != player_id)
        ).all()
        for row, played_at in rows:
            opponents.append(
                OpponentGameResult(
                    game_id=row.game_id,
                    player_id=row.player_id,
                    ranking=row.ranking,
                    played_at=played_at,
                )
            )
    return own, opponents


def get_player_nemeses(session: Session, player_id: int) -> List[NemesisRecord]:
    own, opponents = load_rivalry_inputs(session, player_id)
    nemeses = compute_nemeses(player_id, own, opponents)
    players = load_players_by_id(session, [n.opponent_id for n in nemeses])
    for nemesis in nemeses:
        player = players.get(nemesis.opponent_id)
        nemesis.username = player.username if player else None
    return nemeses


# ── Profile ──────────────────────────────────────────────────────────────

def _chart_timestamp(start_date: Optional[date]) -> int:
    if start_date is None:
        return 0
    midnight = datetime(start_date.year, start_date.month, start_date.day, tzinfo=timezone.utc)
    return int(midnight.timestamp() * 1000)


def _oldest_first(entries: List[EventHistoryEntry]) -> List[EventHistoryEntry]:
    return sorted(entries, key=lambda e: (e.start_date is None, e.start_date or date.min, e.event_id))


def _most_recent(entries: List[EventHistoryEntry]) -> Optional[EventHistoryEntry]:
    dated = [e for e in entries if e.start_date is not None]
    if not dated:
        return None
    return max(dated, key=lambda e: (e.start_date, e.event_id))


def get_player_profile(session: Session, username: str) -> Optional[PlayerProfile]:
    player = session.exec(select(Player).where(Player.username == username)).first()
    if not player:
        logger.debug("No player named %r", username)
        return None

    rows = session.exec(
        select(EventParticipation, Event)
        .join(Event, Event.id == EventParticipation.event_id)
        .where(EventParticipation.player_id == player.id)
    ).all()

    entries: List[EventHistoryEntry] = []
    for participation, event in rows:
        entries.append(
            EventHistoryEntry(
                event_id=event.id,
                name=event.name,
                display_name=remove_year_from_event_name(event.name) or "Unnamed Tournament",
                start_date=event.start_date,
                games_won=participation.games_won or 0,
                rating=round_rating(rating_ordinal(participation.updated_rating)),
                rating_event=is_rating_event(event),
            )
        )
    entries = _oldest_first(entries)

    rating_history = [
        RatingPoint(
            id=index,
            name=entry.display_name,
            full_name=entry.name or "",
            date=get_numeric_date(entry.start_date) if entry.start_date else "unknown",
            timestamp=_chart_timestamp(entry.start_date),
            rating=entry.rating if entry.rating is not None else DEFAULT_RATING,
        )
        for index, entry in enumerate(e for e in entries if e.rating_event)
    ]

    return PlayerProfile(
        player_id=player.id,
        username=player.username,
        rating=round_rating(rating_ordinal(player.current_rating)),
        wins=sum(e.games_won for e in entries),
        tournaments=len(entries),
        most_recent_event=_most_recent(entries),
        events=entries,
        rating_history=rating_history,
        nemeses=get_player_nemeses(session, player.id),
    )
