import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from leaderboard.database import get_session
from leaderboard.services.player_profile import (
    EventHistoryEntry,
    PlayerProfile,
    get_leaderboard,
    get_player_profile,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class LeaderboardRowResponse(BaseModel):
    rank: int
    player_id: int
    username: str
    rating: Optional[int]

    class Config:
        from_attributes = True


class EventHistoryResponse(BaseModel):
    event_id: int
    name: Optional[str]
    display_name: str
    start_date: Optional[date]
    games_won: int
    rating: Optional[int]
    rating_event: bool

    class Config:
        from_attributes = True


class RatingPointResponse(BaseModel):
    id: int
    name: str
    full_name: str
    date: str
    timestamp: int
    rating: int

    class Config:
        from_attributes = True


class NemesisResponse(BaseModel):
    opponent_id: int
    username: Optional[str]
    wins: int
    losses: int
    draws: int
    total_games: int
    score: int

    class Config:
        from_attributes = True


class PlayerProfileResponse(BaseModel):
    player_id: int
    username: str
    rating: Optional[int]
    wins: int
    tournaments: int
    most_recent_event: Optional[EventHistoryResponse] = None
    events: List[EventHistoryResponse]
    rating_history: List[RatingPointResponse]
    nemeses: List[NemesisResponse]


def _build_event(entry: Optional[EventHistoryEntry]) -> Optional[EventHistoryResponse]:
    if entry is None:
        return None
    return EventHistoryResponse.model_validate(entry)


def _build_profile(profile: PlayerProfile) -> PlayerProfileResponse:
    return PlayerProfileResponse(
        player_id=profile.player_id,
        username=profile.username,
        rating=profile.rating,
        wins=profile.wins,
        tournaments=profile.tournaments,
        most_recent_event=_build_event(profile.most_recent_event),
        events=[_build_event(e) for e in profile.events],
        rating_history=[RatingPointResponse.model_validate(p) for p in profile.rating_history],
        nemeses=[NemesisResponse.model_validate(n) for n in profile.nemeses],
    )


@router.get("/leaderboard", response_model=List[LeaderboardRowResponse])
def list_leaderboard(session: Session = Depends(get_session)):
    """Players ranked by current rating"""
    try:
        rows = get_leaderboard(session)
    except SQLAlchemyError as e:
        logger.exception("Failed to load leaderboard")
        raise HTTPException(status_code=500, detail=f"Failed to load leaderboard: {str(e)}")
    return [LeaderboardRowResponse.model_validate(r) for r in rows]


@router.get("/leaderboard/{username}", response_model=PlayerProfileResponse)
def get_player(username: str, session: Session = Depends(get_session)):
    """Profile page data: history, rating chart and nemeses"""
    try:
        profile = get_player_profile(session, username)
    except SQLAlchemyError as e:
        logger.exception("Failed to load player %s", username)
        raise HTTPException(status_code=500, detail=f"Failed to load player: {str(e)}")

    if profile is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return _build_profile(profile)
