"""
Rivalry ("nemesis") aggregation.

For one player, tally a win/loss/draw record against every opponent they have
shared a game with, from that player's point of view:

  win   the player ranked 1
  loss  the opponent ranked 1
  draw  neither ranked 1

Opponents with fewer than 5 shared games are ignored. The rest are scored by
``wins * losses + draws``, which favours long, evenly split histories over
lopsided ones, and the top 3 are returned.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

MIN_SHARED_GAMES = 5
MAX_NEMESES = 3


@dataclass(frozen=True)
class OwnGameResult:
    game_id: int
    ranking: Optional[int]


@dataclass(frozen=True)
class OpponentGameResult:
    game_id: int
    player_id: int
    ranking: Optional[int]
    played_at: Optional[datetime] = None


@dataclass
class NemesisRecord:
    opponent_id: int
    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_games: int = 0
    most_recent_game: Optional[datetime] = None
    score: int = 0
    username: Optional[str] = None


def compute_nemeses(
    player_id: int,
    own_results: Iterable[OwnGameResult],
    opponent_results: Iterable[OpponentGameResult],
    limit: int = MAX_NEMESES,
    min_games: int = MIN_SHARED_GAMES,
) -> List[NemesisRecord]:
    """Return up to ``limit`` rivals, closest rivalry first.

    Inputs may arrive in any order and in any number of batches; each
    (game, opponent) pair is counted once.
    """
    own_ranking: Dict[int, Optional[int]] = {r.game_id: r.ranking for r in own_results}

    records: Dict[int, NemesisRecord] = {}
    counted: Set[Tuple[int, int]] = set()
    for result in opponent_results:
        if result.player_id == player_id or result.game_id not in own_ranking:
            continue
        pair = (result.game_id, result.player_id)
        if pair in counted:
            continue
        counted.add(pair)

        record = records.get(result.player_id)
        if record is None:
            record = NemesisRecord(opponent_id=result.player_id)
            records[result.player_id] = record

        if own_ranking[result.game_id] == 1:
            record.wins += 1
        elif result.ranking == 1:
            record.losses += 1
        else:
            record.draws += 1
        record.total_games += 1

        if result.played_at is not None and (
            record.most_recent_game is None or result.played_at > record.most_recent_game
        ):
            record.most_recent_game = result.played_at

    candidates = [r for r in records.values() if r.total_games >= min_games]
    for record in candidates:
        record.score = record.wins * record.losses + record.draws

    candidates.sort(key=lambda r: r.opponent_id)
    candidates.sort(
        key=lambda r: (r.score, r.total_games, r.most_recent_game is not None, r.most_recent_game),
        reverse=True,
    )
    return candidates[:limit]
