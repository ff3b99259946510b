# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from leaderboard.models.event import Event  # noqa: F401
from leaderboard.models.event_participation import EventParticipation  # noqa: F401
from leaderboard.models.game import Game  # noqa: F401
from leaderboard.models.game_participation import GameParticipation  # noqa: F401
from leaderboard.models.player import Player  # noqa: F401
