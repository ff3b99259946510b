"""
Tournament bracket assembly.

Loads one event's games and results, then runs them through the name parser,
placement resolver and bracket grouper to produce the sections shown on the
tournament page.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session

from leaderboard.models.event import Event
from leaderboard.models.game_participation import GameParticipation
from leaderboard.models.player import Player
from leaderboard.services.bracket_grouper import (
    BracketGame,
    BracketParticipant,
    SectionGroup,
    group_games_by_section,
)
from leaderboard.services.game_name_parser import parse_game_name
from leaderboard.services.placement_resolver import ranking_sort_key, resolve_placements
from leaderboard.services.record_loader import (
    load_event_games,
    load_game_participations,
    load_players_by_id,
)
from leaderboard.services.tournament_format import TournamentFormat, detect_tournament_format
from leaderboard.utils.display import remove_year_from_event_name

logger = logging.getLogger(__name__)


@dataclass
class TournamentHeader:
    event_id: int
    name: Optional[str]
    display_name: str
    start_date: Optional[date]
    winner_id: Optional[int]
    winner_name: Optional[str]
    num_players_per_game: Optional[int]
    tournament_format: TournamentFormat


@dataclass
class TournamentBracket:
    header: TournamentHeader
    sections: List[SectionGroup] = field(default_factory=list)


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def build_participants(
    rows: Iterable[GameParticipation],
    players: Dict[int, Player],
) -> List[BracketParticipant]:
    """Participants of one game with a known player, one entry per player.

    When a player shows up twice the later row only replaces the earlier one
    if it fills in a missing ranking or score.
    """
    by_player: Dict[int, BracketParticipant] = {}
    for row in rows:
        player = players.get(row.player_id)
        if player is None or not player.username:
            continue
        candidate = BracketParticipant(
            player_id=player.id,
            username=player.username,
            ranking=row.ranking,
            final_score=row.final_score,
            faction=_enum_value(row.faction),
            player_mat=_enum_value(row.player_mat),
        )
        existing = by_player.get(player.id)
        if existing is None:
            by_player[player.id] = candidate
        elif (existing.ranking is None and candidate.ranking is not None) or (
            existing.final_score is None and candidate.final_score is not None
        ):
            by_player[player.id] = candidate
    return list(by_player.values())


def apply_placements(participants: List[BracketParticipant]) -> List[BracketParticipant]:
    """Fill in placements, then order winner first (no ranking last)."""
    placements = resolve_placements(participants)
    for index, participant in enumerate(participants):
        participant.placement = placements.get(index)
    return sorted(participants, key=lambda p: ranking_sort_key(p.ranking))


def build_tournament_bracket(session: Session, event_id: int) -> Optional[TournamentBracket]:
    """Bracket for one event, or None if the event does not exist."""
    event = session.get(Event, event_id)
    if not event:
        return None

    tournament_format = detect_tournament_format(event.name)
    games = load_event_games(session, event.id)
    participations = load_game_participations(session, [g.id for g in games])
    players = load_players_by_id(session, [p.player_id for p in participations])
    if event.winner is not None and event.winner not in players:
        players.update(load_players_by_id(session, [event.winner]))

    rows_by_game: Dict[int, List[GameParticipation]] = defaultdict(list)
    for row in participations:
        rows_by_game[row.game_id].append(row)

    bracket_games = []
    for game in games:
        participants = build_participants(rows_by_game.get(game.id, []), players)
        bracket_games.append(
            BracketGame(
                game_id=game.id,
                name=game.name,
                parsed=parse_game_name(game.name, tournament_format),
                participants=apply_placements(participants),
            )
        )

    sections = group_games_by_section(bracket_games)
    logger.debug(
        "Event %s (%s): %d games -> %d sections",
        event.id,
        tournament_format.value,
        len(games),
        len(sections),
    )

    winner = players.get(event.winner) if event.winner is not None else None
    header = TournamentHeader(
        event_id=event.id,
        name=event.name,
        display_name=remove_year_from_event_name(event.name),
        start_date=event.start_date,
        winner_id=event.winner,
        winner_name=winner.username if winner else None,
        num_players_per_game=event.num_players_per_game,
        tournament_format=tournament_format,
    )
    return TournamentBracket(header=header, sections=sections)
