"""
Bracket grouping.

Turns a flat list of parsed games into ordered bracket sections (rounds,
tiers, elimination stages). Output order only depends on the parsed values,
never on database row order, except for which duplicate-named game survives
and which game sets the sort order of a section.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from leaderboard.services.game_name_parser import UNKNOWN_SECTION_KEY, ParsedGame

logger = logging.getLogger(__name__)

UNNAMED_GAME = "unnamed"

_DIGITS = re.compile(r"(\d+)")


@dataclass
class BracketParticipant:
    player_id: int
    username: str
    ranking: Optional[int] = None
    final_score: Optional[int] = None
    faction: Optional[str] = None
    player_mat: Optional[str] = None
    placement: Optional[int] = None


@dataclass
class BracketGame:
    game_id: int
    name: Optional[str]
    parsed: ParsedGame
    participants: List[BracketParticipant] = field(default_factory=list)


@dataclass
class SectionGroup:
    section_key: str
    section_label: str
    sort_order: int
    games: List[BracketGame] = field(default_factory=list)


def select_bracket_games(games: Iterable[BracketGame]) -> List[BracketGame]:
    """Drop games without participants and repeated names.

    For each name only the first game (in the order supplied) that has at
    least one participant is kept; a nameless game counts as "unnamed".
    """
    selected: List[BracketGame] = []
    seen_names: Set[str] = set()
    for game in games:
        if not game.participants:
            logger.debug("Skipping game %s (%r): no participants", game.game_id, game.name)
            continue
        name = game.name or UNNAMED_GAME
        if name in seen_names:
            logger.info("Skipping duplicate game %s named %r", game.game_id, name)
            continue
        seen_names.add(name)
        selected.append(game)
    return selected


def display_sort_key(display_name: str) -> List[Any]:
    """Natural order for display names: 'A2' before 'A10', 'Game 9' before 'Game 10'."""
    return [int(part) if part.isdecimal() else part.lower() for part in _DIGITS.split(display_name)]


def _section_sort_key(section: SectionGroup):
    # unknown always last, whatever band a parsed section lands in
    return (section.section_key == UNKNOWN_SECTION_KEY, section.sort_order, section.section_key)


def group_games_by_section(games: Iterable[BracketGame]) -> List[SectionGroup]:
    """Bucket games by section key and order sections and games.

    Sections sort by (sort_order, section_key) with the unknown section last;
    games inside a section by (sort_order, display_name), numbers in display
    names compared as numbers. The first game seen for a section supplies its
    label and sort order.
    """
    sections: Dict[str, SectionGroup] = {}
    for game in select_bracket_games(games):
        parsed = game.parsed
        section = sections.get(parsed.section_key)
        if section is None:
            section = SectionGroup(
                section_key=parsed.section_key,
                section_label=parsed.section_label,
                sort_order=parsed.sort_order,
            )
            sections[parsed.section_key] = section
        section.games.append(game)

    ordered = sorted(sections.values(), key=_section_sort_key)
    for section in ordered:
        section.games.sort(key=lambda g: (g.parsed.sort_order, display_sort_key(g.parsed.display_name)))
    return ordered
