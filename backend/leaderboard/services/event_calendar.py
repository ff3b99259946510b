"""
Rating events grouped by year for the about page.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from sqlmodel import Session, select

from leaderboard.models.event import Event
from leaderboard.utils.display import get_formatted_date, remove_year_from_event_name

logger = logging.getLogger(__name__)


@dataclass
class CalendarEvent:
    id: int
    name: Optional[str]
    display_name: str
    start_date: date
    formatted_date: str
    num_players_per_game: Optional[int]


@dataclass
class EventYear:
    year: int
    events: List[CalendarEvent] = field(default_factory=list)


def sort_events_by_date(events: List[CalendarEvent]) -> List[CalendarEvent]:
    """Oldest first; same-day events keep id order."""
    return sorted(events, key=lambda e: (e.start_date, e.id))


def get_events_by_year(session: Session) -> List[EventYear]:
    events = session.exec(select(Event).where(Event.rating_event == True)).all()  # noqa: E712

    by_year: Dict[int, List[CalendarEvent]] = {}
    for event in events:
        if event.start_date is None:
            logger.debug("Skipping event %s without a start date", event.id)
            continue
        by_year.setdefault(event.start_date.year, []).append(
            CalendarEvent(
                id=event.id,
                name=event.name,
                display_name=remove_year_from_event_name(event.name) or "Unnamed Tournament",
                start_date=event.start_date,
                formatted_date=get_formatted_date(event.start_date),
                num_players_per_game=event.num_players_per_game,
            )
        )

    return [
        EventYear(year=year, events=sort_events_by_date(by_year[year]))
        for year in sorted(by_year, reverse=True)
    ]
