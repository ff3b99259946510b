"""
Batched reads shared by the page services.

Every lookup keyed by a list of ids goes through chunked() so a tournament
with hundreds of games never produces one giant IN clause.
"""
from typing import Dict, Iterable, List

from sqlmodel import Session, select

from leaderboard.models.game import Game
from leaderboard.models.game_participation import GameParticipation
from leaderboard.models.player import Player
from leaderboard.utils.sql import chunked


def load_players_by_id(session: Session, player_ids: Iterable[int]) -> Dict[int, Player]:
    ids = sorted({pid for pid in player_ids if pid is not None})
    players: Dict[int, Player] = {}
    for batch in chunked(ids):
        for player in session.exec(select(Player).where(Player.id.in_(batch))).all():
            players[player.id] = player
    return players


def load_game_participations(session: Session, game_ids: Iterable[int]) -> List[GameParticipation]:
    ids = sorted(set(game_ids))
    rows: List[GameParticipation] = []
    for batch in chunked(ids):
        rows.extend(
            session.exec(
                select(GameParticipation)
                .where(GameParticipation.game_id.in_(batch))
                .order_by(GameParticipation.game_id, GameParticipation.player_id)
            ).all()
        )
    return rows


def load_event_games(session: Session, event_id: int) -> List[Game]:
    """Games of one event, oldest first."""
    return list(
        session.exec(
            select(Game).where(Game.event_id == event_id).order_by(Game.created_at, Game.id)
        ).all()
    )
