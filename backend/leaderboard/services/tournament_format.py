"""
Tournament format detection.

A format is picked once per event from its display name and applied to every
game in that event:

  "2024 Winter League"  -> league        (Tier N, Game M)
  "Spring 1v1 Open"     -> head-to-head  (flat G1, G2, ...)
  anything else         -> standard      (rounds + elimination stages)
"""
from enum import Enum
from typing import Optional


class TournamentFormat(str, Enum):
    standard = "standard"
    league = "league"
    head_to_head = "head-to-head"


def detect_tournament_format(event_name: Optional[str]) -> TournamentFormat:
    """Classify an event by name. Never raises; None -> standard."""
    if not event_name:
        return TournamentFormat.standard
    lowered = event_name.lower()
    if "league" in lowered:
        return TournamentFormat.league
    if "1v1" in lowered:
        return TournamentFormat.head_to_head
    return TournamentFormat.standard
