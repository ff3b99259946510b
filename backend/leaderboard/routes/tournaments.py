import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from leaderboard.database import get_session
from leaderboard.services.bracket_grouper import BracketGame, BracketParticipant, SectionGroup
from leaderboard.services.game_name_parser import is_elimination_section
from leaderboard.services.tournament_bracket import TournamentBracket, build_tournament_bracket
from leaderboard.services.tournament_list import TournamentSummary, list_tournaments

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Response models ──────────────────────────────────────────────────────

class FinalistResponse(BaseModel):
    id: int
    username: str


class TournamentSummaryResponse(BaseModel):
    id: int
    name: Optional[str]
    display_name: str
    start_date: Optional[date]
    num_players_per_game: Optional[int]
    bid: Optional[bool]
    draft: Optional[bool]
    rating_event: Optional[bool]
    winner: Optional[int]
    winner_name: Optional[str]
    player_count: int
    games_count: int
    finalists: List[FinalistResponse] = []


class TournamentListResponse(BaseModel):
    tournaments: List[TournamentSummaryResponse]
    last_updated: Optional[datetime] = None


class ParticipantResponse(BaseModel):
    player_id: int
    username: str
    ranking: Optional[int]
    placement: Optional[int]
    final_score: Optional[int]
    faction: Optional[str]
    player_mat: Optional[str]


class GameResponse(BaseModel):
    game_id: int
    name: Optional[str]
    display_name: str
    sort_order: int
    participants: List[ParticipantResponse]


class SectionResponse(BaseModel):
    section_key: str
    section_label: str
    sort_order: int
    is_elimination: bool  # knockout stage, drawn as a bracket column
    games: List[GameResponse]


class TournamentDetailResponse(BaseModel):
    event_id: int
    name: Optional[str]
    display_name: str
    start_date: Optional[date]
    winner_id: Optional[int]
    winner_name: Optional[str]
    num_players_per_game: Optional[int]
    tournament_format: str
    sections: List[SectionResponse]


# ── Builders ─────────────────────────────────────────────────────────────

def _build_summary(summary: TournamentSummary) -> TournamentSummaryResponse:
    return TournamentSummaryResponse(
        id=summary.id,
        name=summary.name,
        display_name=summary.display_name,
        start_date=summary.start_date,
        num_players_per_game=summary.num_players_per_game,
        bid=summary.bid,
        draft=summary.draft,
        rating_event=summary.rating_event,
        winner=summary.winner,
        winner_name=summary.winner_name,
        player_count=summary.player_count,
        games_count=summary.games_count,
        finalists=[FinalistResponse(id=f.id, username=f.username) for f in summary.finalists],
    )


def _build_participant(p: BracketParticipant) -> ParticipantResponse:
    return ParticipantResponse(
        player_id=p.player_id,
        username=p.username,
        ranking=p.ranking,
        placement=p.placement,
        final_score=p.final_score,
        faction=p.faction,
        player_mat=p.player_mat,
    )


def _build_game(game: BracketGame) -> GameResponse:
    return GameResponse(
        game_id=game.game_id,
        name=game.name,
        display_name=game.parsed.display_name,
        sort_order=game.parsed.sort_order,
        participants=[_build_participant(p) for p in game.participants],
    )


def _build_section(section: SectionGroup) -> SectionResponse:
    return SectionResponse(
        section_key=section.section_key,
        section_label=section.section_label,
        sort_order=section.sort_order,
        is_elimination=is_elimination_section(section.section_key),
        games=[_build_game(g) for g in section.games],
    )


def _build_detail(bracket: TournamentBracket) -> TournamentDetailResponse:
    header = bracket.header
    return TournamentDetailResponse(
        event_id=header.event_id,
        name=header.name,
        display_name=header.display_name,
        start_date=header.start_date,
        winner_id=header.winner_id,
        winner_name=header.winner_name,
        num_players_per_game=header.num_players_per_game,
        tournament_format=header.tournament_format.value,
        sections=[_build_section(s) for s in bracket.sections],
    )


# ── Endpoints ────────────────────────────────────────────────────────────

@router.get("/tournaments", response_model=TournamentListResponse)
def get_tournaments(session: Session = Depends(get_session)):
    """All tournaments, newest first, with counts and finalists"""
    try:
        result = list_tournaments(session)
    except SQLAlchemyError as e:
        logger.exception("Failed to load tournaments")
        raise HTTPException(status_code=500, detail=f"Failed to load tournaments: {str(e)}")

    return TournamentListResponse(
        tournaments=[_build_summary(t) for t in result.tournaments],
        last_updated=result.last_updated,
    )


@router.get("/tournaments/{event_id}", response_model=TournamentDetailResponse)
def get_tournament(event_id: int, session: Session = Depends(get_session)):
    """One tournament's games grouped into bracket sections"""
    try:
        bracket = build_tournament_bracket(session, event_id)
    except SQLAlchemyError as e:
        logger.exception("Failed to load tournament %s", event_id)
        raise HTTPException(status_code=500, detail=f"Failed to load tournament: {str(e)}")

    if bracket is None:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return _build_detail(bracket)
