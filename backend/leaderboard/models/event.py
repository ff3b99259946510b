from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from leaderboard.models.event_participation import EventParticipation
    from leaderboard.models.game import Game


class Event(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = None
    start_date: Optional[date] = Field(default=None, index=True)
    winner: Optional[int] = Field(default=None, foreign_key="player.id")
    num_players_per_game: Optional[int] = None
    bid: Optional[bool] = None
    draft: Optional[bool] = None
    rating_event: Optional[bool] = None  # counts toward the tournament rating
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    games: List["Game"] = Relationship(back_populates="event")
    participations: List["EventParticipation"] = Relationship(back_populates="event")
