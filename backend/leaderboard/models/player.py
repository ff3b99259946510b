from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from leaderboard.models.event_participation import EventParticipation
    from leaderboard.models.game_participation import GameParticipation


class Player(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    # Rating blob written by the rating job: {"mu": .., "sigma": .., "ordinal": ..}
    current_rating: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    event_participations: List["EventParticipation"] = Relationship(back_populates="player")
    game_participations: List["GameParticipation"] = Relationship(back_populates="player")


def rating_ordinal(rating: Optional[Dict[str, Any]]) -> Optional[float]:
    """Pull the ordinal out of a rating blob, None when missing or non-numeric."""
    if not rating or not isinstance(rating, dict):
        return None
    value = rating.get("ordinal")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)
