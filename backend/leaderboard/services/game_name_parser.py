"""
Game name parser.

Organizers have typed game names by hand for years, so the same thing shows up
as "SF A1", "Semi A G1" or "sf a 1". Each name is run through a prioritized
rule cascade for the event's format; the first rule whose pattern matches the
whole (whitespace-collapsed, case-insensitive) name builds the result. Names
no rule understands land in the "unknown" section and sort last.

Sort-order bands (shared with the bracket page, keep stable):

  regular rounds      round * 100 + group ordinal        (round capped at 19)
  pre-quarters        2000 + sub-order
  quarterfinals       3000 + sub-order
  elimination         4000 + sub-order
  semifinal play-in   5000 + sub-order
  semifinals          6000 + sub-order
  finals play-in      7000 + sub-order
  finals              8000 + sub-order
  league tiers        tier * 1000 + game
  head-to-head        game
  unknown             9999

Inside an elimination band a bare game number n sorts at base + n and a
group letter L with game n at base + ordinal(L) * 30 + n.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from leaderboard.services.tournament_format import TournamentFormat

logger = logging.getLogger(__name__)

ROUND_BAND = 100
MAX_BANDED_ROUND = 19
GROUP_SLOT = 30

PRE_QUARTERS_BASE = 2000
QUARTERFINALS_BASE = 3000
ELIMINATION_BASE = 4000
SEMIFINAL_PLAY_IN_BASE = 5000
SEMIFINALS_BASE = 6000
FINALS_PLAY_IN_BASE = 7000
FINALS_BASE = 8000

LEAGUE_TIER_BAND = 1000
UNKNOWN_SORT_ORDER = 9999

UNKNOWN_SECTION_KEY = "unknown"
HEAD_TO_HEAD_SECTION_KEY = "games"


@dataclass(frozen=True)
class ParsedGame:
    section_key: str
    section_label: str
    display_name: str
    sort_order: int


@dataclass(frozen=True)
class EliminationStage:
    key: str
    label: str
    base: int
    token: str  # regex alternation for the stage abbreviation


PRE_QUARTERS = EliminationStage("pre-quarters", "PreQuarters", PRE_QUARTERS_BASE, r"pq|pre\s*-?\s*quarters?(?:\s*finals?)?")
QUARTERFINALS = EliminationStage("quarterfinals", "Quarterfinals", QUARTERFINALS_BASE, r"q[fe]|quarter\s*-?\s*finals?|quarters?")
ELIMINATION = EliminationStage("elimination", "Elimination", ELIMINATION_BASE, r"elim(?:ination)?")
SEMIFINAL_PLAY_IN = EliminationStage("semifinals-play-in", "Semifinals Play-In", SEMIFINAL_PLAY_IN_BASE, "")
SEMIFINALS = EliminationStage("semifinals", "Semifinals", SEMIFINALS_BASE, r"s[fe]|semi\s*-?\s*finals?|semis?")
FINALS_PLAY_IN = EliminationStage("finals-play-in", "Finals Play-In", FINALS_PLAY_IN_BASE, "")
# A lone "F" must be followed by a space or the end so "F1" stays group F, round 1.
FINALS = EliminationStage("finals", "Finals", FINALS_BASE, r"ff|finals?|f(?=\s|$)")

ELIMINATION_STAGES = [
    PRE_QUARTERS,
    QUARTERFINALS,
    ELIMINATION,
    SEMIFINAL_PLAY_IN,
    SEMIFINALS,
    FINALS_PLAY_IN,
    FINALS,
]
ELIMINATION_SECTION_KEYS = frozenset(stage.key for stage in ELIMINATION_STAGES)

_PLAY_IN = r"play\s*-?\s*in"


@dataclass(frozen=True)
class NameRule:
    pattern: "re.Pattern[str]"
    handler: Callable[["re.Match[str]"], ParsedGame]
    priority: int


def _rule(pattern: str, handler: Callable[["re.Match[str]"], ParsedGame], priority: int) -> NameRule:
    return NameRule(re.compile(pattern, re.IGNORECASE), handler, priority)


def _letter_ordinal(letter: str) -> int:
    return ord(letter.upper()) - ord("A") + 1


def _clamp_game(number: int) -> int:
    return max(0, min(number, GROUP_SLOT - 1))


# ── Section builders ─────────────────────────────────────────────────────

def _round_game(round_number: int, display_name: str, sub_order: int) -> ParsedGame:
    base = min(round_number, MAX_BANDED_ROUND) * ROUND_BAND
    return ParsedGame(
        section_key=f"round-{round_number}",
        section_label=f"Round {round_number}",
        display_name=display_name,
        sort_order=base + sub_order,
    )


def _stage_game(stage: EliminationStage, display_name: str, sub_order: int) -> ParsedGame:
    return ParsedGame(
        section_key=stage.key,
        section_label=stage.label,
        display_name=display_name,
        sort_order=stage.base + sub_order,
    )


def _stage_numbered(stage: EliminationStage, number: int) -> ParsedGame:
    return _stage_game(stage, f"Game {number}", _clamp_game(number))


def _stage_grouped(stage: EliminationStage, letter: str, number: Optional[int]) -> ParsedGame:
    letter = letter.upper()
    sub_order = _letter_ordinal(letter) * GROUP_SLOT + _clamp_game(number or 0)
    display_name = f"{letter}{number}" if number is not None else letter
    return _stage_game(stage, display_name, sub_order)


def _tier_game(tier: int, game: Optional[int], display_name: str) -> ParsedGame:
    base = tier * LEAGUE_TIER_BAND
    return ParsedGame(
        section_key=f"tier-{tier}",
        section_label=f"Tier {tier}",
        display_name=display_name,
        sort_order=base + (game or 0),
    )


def unknown_game(name: Optional[str]) -> ParsedGame:
    return ParsedGame(
        section_key=UNKNOWN_SECTION_KEY,
        section_label="Unknown",
        display_name=(name or "").strip(),
        sort_order=UNKNOWN_SORT_ORDER,
    )


# ── Rule tables ──────────────────────────────────────────────────────────

def _play_in_rules(stage: EliminationStage, prefix: str, priority: int) -> NameRule:
    def handle(m: "re.Match[str]") -> ParsedGame:
        return _stage_numbered(stage, int(m.group(1)) if m.group(1) else 1)

    return _rule(rf"{prefix}{_PLAY_IN}(?:\s*(\d+))?", handle, priority)


def _grouped_play_in_rule(stage: EliminationStage, prefix: str, priority: int) -> NameRule:
    # "Play-In A G1", "Playin B2", "SF Play-In A G1"
    return _rule(
        rf"{prefix}{_PLAY_IN}\s+([a-z])\s*(?:g\s*)?(\d+)",
        lambda m: _stage_grouped(stage, m.group(1), int(m.group(2))),
        priority,
    )


def _stage_rules(stage: EliminationStage) -> List[NameRule]:
    token = f"(?:{stage.token})"
    return [
        # "SF G1", "QF Game 2": a game number, not group G
        _rule(
            rf"{token}\s+g(?:ame)?\s*(\d+)",
            lambda m: _stage_numbered(stage, int(m.group(1))),
            85,
        ),
        # "SF A1", "Semi A G1", "QF B 2"
        _rule(
            rf"{token}\s+([a-z])\s*(?:g\s*)?(\d+)",
            lambda m: _stage_grouped(stage, m.group(1), int(m.group(2))),
            80,
        ),
        # "Elimination 1a"
        _rule(
            rf"{token}\s+(\d+)([a-z])",
            lambda m: _stage_grouped(stage, m.group(2), int(m.group(1))),
            79,
        ),
        # "SF A", "Elim B"
        _rule(rf"{token}\s+([a-z])", lambda m: _stage_grouped(stage, m.group(1), None), 70),
        # "QF1", "QF 1", "Finals 2"
        _rule(rf"{token}\s*(\d+)", lambda m: _stage_numbered(stage, int(m.group(1))), 60),
        # "FF", "Semifinal"
        _rule(token, lambda m: _stage_numbered(stage, 1), 50),
    ]


def _standard_rules() -> List[NameRule]:
    rules = [
        _play_in_rules(SEMIFINAL_PLAY_IN, rf"(?:{SEMIFINALS.token})\s*", 100),
        _play_in_rules(FINALS_PLAY_IN, rf"(?:{FINALS.token})\s*", 99),
        _play_in_rules(FINALS_PLAY_IN, "", 98),
        _grouped_play_in_rule(SEMIFINAL_PLAY_IN, rf"(?:{SEMIFINALS.token})\s*", 97),
        _grouped_play_in_rule(FINALS_PLAY_IN, rf"(?:{FINALS.token})\s*", 96),
        _grouped_play_in_rule(FINALS_PLAY_IN, "", 90),
    ]
    for stage in (PRE_QUARTERS, QUARTERFINALS, ELIMINATION, SEMIFINALS, FINALS):
        rules.extend(_stage_rules(stage))

    rules.extend(
        [
            # "R1 A1", "Round 2 B 3", "R1 A G2"
            _rule(
                r"r(?:ound)?\s*(\d+)\s+([a-z])\s*(?:g\s*)?(\d+)",
                lambda m: _round_game(
                    int(m.group(1)),
                    f"{m.group(2).upper()}{int(m.group(3))}",
                    _letter_ordinal(m.group(2)),
                ),
                40,
            ),
            # "R2 B"
            _rule(
                r"r(?:ound)?\s*(\d+)\s+([a-z])",
                lambda m: _round_game(int(m.group(1)), m.group(2).upper(), _letter_ordinal(m.group(2))),
                38,
            ),
            # "R3"
            _rule(
                r"r(?:ound)?\s*(\d+)",
                lambda m: _round_game(int(m.group(1)), f"R{int(m.group(1))}", 0),
                37,
            ),
            # "A1 G2": group A, round 1, game 2
            _rule(
                r"([a-z])(\d+)\s+g\s*(\d+)",
                lambda m: _round_game(
                    int(m.group(2)),
                    f"{m.group(1).upper()} G{int(m.group(3))}",
                    _letter_ordinal(m.group(1)),
                ),
                35,
            ),
            # "A1", "Group B2": group + round
            _rule(
                r"(?:group\s*)?([a-z])(\d+)",
                lambda m: _round_game(
                    int(m.group(2)),
                    f"{m.group(1).upper()}{int(m.group(2))}",
                    _letter_ordinal(m.group(1)),
                ),
                30,
            ),
        ]
    )
    return rules


def _league_rules() -> List[NameRule]:
    return [
        _rule(
            r"tier\s*(\d+)\s+g(?:ame)?\s*(\d+)",
            lambda m: _tier_game(int(m.group(1)), int(m.group(2)), f"G{int(m.group(2))}"),
            100,
        ),
        _rule(
            r"t([123])\s+g(?:ame)?\s*(\d+)",
            lambda m: _tier_game(int(m.group(1)), int(m.group(2)), f"G{int(m.group(2))}"),
            99,
        ),
        _rule(r"tier\s*(\d+)", lambda m: _tier_game(int(m.group(1)), None, f"Tier {int(m.group(1))}"), 98),
        _rule(r"t([123])", lambda m: _tier_game(int(m.group(1)), None, f"Tier {int(m.group(1))}"), 97),
    ]


def _head_to_head_game(game: int) -> ParsedGame:
    return ParsedGame(
        section_key=HEAD_TO_HEAD_SECTION_KEY,
        section_label="Games",
        display_name=f"G{game}",
        sort_order=game,
    )


def _head_to_head_rules() -> List[NameRule]:
    return [_rule(r"g(?:ame)?\s*(\d+)", lambda m: _head_to_head_game(int(m.group(1))), 100)]


def _by_priority(rules: List[NameRule]) -> List[NameRule]:
    return sorted(rules, key=lambda r: r.priority, reverse=True)


RULES_BY_FORMAT: Dict[TournamentFormat, List[NameRule]] = {
    TournamentFormat.standard: _by_priority(_standard_rules()),
    TournamentFormat.league: _by_priority(_league_rules()),
    TournamentFormat.head_to_head: _by_priority(_head_to_head_rules()),
}


def normalize_game_name(name: Optional[str]) -> str:
    """Trim and collapse inner whitespace."""
    if not name:
        return ""
    return " ".join(name.split())


def parse_game_name(
    name: Optional[str],
    tournament_format: TournamentFormat = TournamentFormat.standard,
) -> ParsedGame:
    """Classify a raw game name into section / display name / sort order.

    Never raises: anything the rules for ``tournament_format`` do not
    recognise comes back as the "unknown" section with sort order 9999.
    """
    normalized = normalize_game_name(name)
    if not normalized:
        return unknown_game(name)

    for rule in RULES_BY_FORMAT[tournament_format]:
        match = rule.pattern.fullmatch(normalized)
        if match:
            return rule.handler(match)

    logger.debug("Unrecognised %s game name %r", tournament_format.value, name)
    return unknown_game(name)


def is_elimination_section(section_key: str) -> bool:
    return section_key in ELIMINATION_SECTION_KEYS
