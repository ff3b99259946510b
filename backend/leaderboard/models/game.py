from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from leaderboard.models.event import Event
    from leaderboard.models.game_participation import GameParticipation


class Game(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = None  # free text entered by the organizer ("R1 A1", "QF1", "FF")
    event_id: int = Field(foreign_key="event.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    # Relationships
    event: "Event" = Relationship(back_populates="games")
    participations: List["GameParticipation"] = Relationship(back_populates="game")
