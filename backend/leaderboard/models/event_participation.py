from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from leaderboard.models.event import Event
    from leaderboard.models.player import Player


class EventParticipation(SQLModel, table=True):
    event_id: int = Field(foreign_key="event.id", primary_key=True)
    player_id: int = Field(foreign_key="player.id", primary_key=True, index=True)
    games_won: Optional[int] = None
    # Rating snapshot after this event: {"mu": .., "sigma": .., "ordinal": ..}
    updated_rating: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    event: "Event" = Relationship(back_populates="participations")
    player: "Player" = Relationship(back_populates="event_participations")
