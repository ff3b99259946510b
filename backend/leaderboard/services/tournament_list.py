"""
Tournament list: every event with its player count, game count, winner and
finalists, newest first.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Set

from sqlalchemy import func
from sqlmodel import Session, select

from leaderboard.models.event import Event
from leaderboard.models.event_participation import EventParticipation
from leaderboard.models.game import Game
from leaderboard.models.game_participation import GameParticipation
from leaderboard.services.placement_resolver import ranking_sort_key
from leaderboard.services.record_loader import load_players_by_id
from leaderboard.utils.display import remove_year_from_event_name
from leaderboard.utils.sql import chunked, scalar_int

# Finalists are only looked up among the last few games of an event.
FINALS_LOOKBACK = 2


@dataclass
class Finalist:
    id: int
    username: str


@dataclass
class TournamentSummary:
    id: int
    name: Optional[str]
    display_name: str
    start_date: Optional[date]
    num_players_per_game: Optional[int]
    bid: Optional[bool]
    draft: Optional[bool]
    rating_event: Optional[bool]
    winner: Optional[int]
    winner_name: Optional[str]
    player_count: int
    games_count: int
    finalists: List[Finalist] = field(default_factory=list)


@dataclass
class TournamentList:
    tournaments: List[TournamentSummary]
    last_updated: Optional[datetime]


def is_finals_game_name(name: Optional[str]) -> bool:
    """'FF', 'FF2', 'Finals', 'Grand Final' are finals; 'F1' is not."""
    if not name:
        return False
    lowered = name.strip().lower()
    return "final" in lowered or lowered.startswith("ff")


def find_finals_game(session: Session, event_id: int) -> Optional[Game]:
    """The most recent of the event's last games whose name reads as a final."""
    recent = session.exec(
        select(Game)
        .where(Game.event_id == event_id)
        .order_by(Game.created_at.desc(), Game.id.desc())
        .limit(FINALS_LOOKBACK)
    ).all()
    for game in recent:
        if is_finals_game_name(game.name):
            return game
    return None


def get_finalists(session: Session, event_id: int) -> List[Finalist]:
    finals = find_finals_game(session, event_id)
    if finals is None:
        return []

    rows = session.exec(select(GameParticipation).where(GameParticipation.game_id == finals.id)).all()
    rows = sorted(rows, key=lambda r: (ranking_sort_key(r.ranking), r.player_id))
    players = load_players_by_id(session, [r.player_id for r in rows])

    finalists: List[Finalist] = []
    seen: Set[int] = set()
    for row in rows:
        player = players.get(row.player_id)
        if player is None or player.id in seen:
            continue
        seen.add(player.id)
        finalists.append(Finalist(id=player.id, username=player.username))
    return finalists


def _player_counts(session: Session, event_ids: List[int]) -> Dict[int, int]:
    players_by_event: Dict[int, Set[int]] = {}
    for batch in chunked(event_ids):
        rows = session.exec(
            select(EventParticipation.event_id, EventParticipation.player_id).where(
                EventParticipation.event_id.in_(batch)
            )
        ).all()
        for event_id, player_id in rows:
            players_by_event.setdefault(event_id, set()).add(player_id)
    return {event_id: len(players) for event_id, players in players_by_event.items()}


def _game_counts(session: Session, event_ids: List[int]) -> Dict[int, int]:
    counts: Dict[int, int] = {}
    for batch in chunked(event_ids):
        rows = session.exec(
            select(Game.event_id, func.count(Game.id)).where(Game.event_id.in_(batch)).group_by(Game.event_id)
        ).all()
        for event_id, count in rows:
            counts[event_id] = scalar_int(count)
    return counts


def _newest_first(events: List[Event]) -> List[Event]:
    by_id = sorted(events, key=lambda e: e.id, reverse=True)
    return sorted(by_id, key=lambda e: (e.start_date is not None, e.start_date or date.min), reverse=True)


def list_tournaments(session: Session) -> TournamentList:
    events = _newest_first(list(session.exec(select(Event)).all()))
    if not events:
        return TournamentList(tournaments=[], last_updated=None)

    last_updated = session.exec(select(func.max(Game.created_at))).one()

    event_ids = [e.id for e in events]
    player_counts = _player_counts(session, event_ids)
    game_counts = _game_counts(session, event_ids)
    winners = load_players_by_id(session, [e.winner for e in events if e.winner is not None])

    tournaments: List[TournamentSummary] = []
    for event in events:
        finalists: List[Finalist] = []
        if event.num_players_per_game and event.num_players_per_game > 2:
            finalists = get_finalists(session, event.id)
        winner = winners.get(event.winner) if event.winner is not None else None
        tournaments.append(
            TournamentSummary(
                id=event.id,
                name=event.name,
                display_name=remove_year_from_event_name(event.name) or "Unnamed Tournament",
                start_date=event.start_date,
                num_players_per_game=event.num_players_per_game,
                bid=event.bid,
                draft=event.draft,
                rating_event=event.rating_event,
                winner=event.winner,
                winner_name=winner.username if winner else None,
                player_count=player_counts.get(event.id, 0),
                games_count=game_counts.get(event.id, 0),
                finalists=finalists,
            )
        )

    return TournamentList(tournaments=tournaments, last_updated=last_updated)
