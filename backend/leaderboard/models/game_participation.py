from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from leaderboard.models.game import Game
    from leaderboard.models.player import Player


class Faction(str, Enum):
    polania = "polania"
    albion = "albion"
    nordic = "nordic"
    rusviet = "rusviet"
    togawa = "togawa"
    crimea = "crimea"
    saxony = "saxony"


class PlayerMat(str, Enum):
    industrial = "industrial"
    engineering = "engineering"
    militant = "militant"
    patriotic = "patriotic"
    innovative = "innovative"
    mechanical = "mechanical"
    agricultural = "agricultural"


class GameParticipation(SQLModel, table=True):
    game_id: int = Field(foreign_key="game.id", primary_key=True)
    player_id: int = Field(foreign_key="player.id", primary_key=True, index=True)
    ranking: Optional[int] = None  # 1 = winner; ties share a value
    final_score: Optional[int] = None
    faction: Optional[Faction] = Field(default=None, sa_column=Column(String, nullable=True))
    player_mat: Optional[PlayerMat] = Field(default=None, sa_column=Column(String, nullable=True))
    bid: Optional[int] = None
    updated_rating: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    game: "Game" = Relationship(back_populates="participations")
    player: "Player" = Relationship(back_populates="game_participations")
