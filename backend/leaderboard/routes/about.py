import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from leaderboard.database import get_session
from leaderboard.services.event_calendar import get_events_by_year

logger = logging.getLogger(__name__)

router = APIRouter()


class CalendarEventResponse(BaseModel):
    id: int
    name: Optional[str]
    display_name: str
    start_date: date
    formatted_date: str
    num_players_per_game: Optional[int]

    class Config:
        from_attributes = True


class EventYearResponse(BaseModel):
    year: int
    events: List[CalendarEventResponse]

    class Config:
        from_attributes = True


@router.get("/about/events", response_model=List[EventYearResponse])
def list_events_by_year(session: Session = Depends(get_session)):
    """Rating events grouped by year, newest year first"""
    try:
        years = get_events_by_year(session)
    except SQLAlchemyError as e:
        logger.exception("Failed to load events")
        raise HTTPException(status_code=500, detail=f"Failed to load events: {str(e)}")
    return [EventYearResponse.model_validate(y) for y in years]
