from leaderboard.models.event import Event
from leaderboard.models.event_participation import EventParticipation
from leaderboard.models.game import Game
from leaderboard.models.game_participation import Faction, GameParticipation, PlayerMat
from leaderboard.models.player import Player, rating_ordinal

__all__ = [
    "Player",
    "Event",
    "Game",
    "GameParticipation",
    "EventParticipation",
    "Faction",
    "PlayerMat",
    "rating_ordinal",
]
