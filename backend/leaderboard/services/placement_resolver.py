"""
Placement resolution for a single game.

Organizers record a ranking per player (1 = winner) and ties are common. For
games with three or more players a shared ranking is split by final score
using competition ranking: within a tie group a player's place is the shared
ranking plus the number of tied players with a strictly higher score.

  rankings [1, 2, 2, 2], scores [50, 40, 40, 30]  ->  places [1, 2, 2, 4]

Rank 1 is never split. Tied players without a score keep the shared ranking.
Players without a ranking get no placement.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)

MISSING_RANKING_SORT_VALUE = 999


def resolve_placements(participants: Sequence[Any]) -> Dict[int, int]:
    """Map participant index -> placement.

    Each participant needs ``ranking`` and ``final_score`` attributes (either
    may be None).
    """
    placements: Dict[int, int] = {}

    if len(participants) < 3:
        for index, participant in enumerate(participants):
            if participant.ranking is not None:
                placements[index] = participant.ranking
        return placements

    by_ranking: Dict[int, List[int]] = defaultdict(list)
    for index, participant in enumerate(participants):
        if participant.ranking is not None:
            by_ranking[participant.ranking].append(index)

    for ranking, indexes in by_ranking.items():
        if ranking == 1 or len(indexes) == 1:
            if ranking == 1 and len(indexes) > 1:
                logger.warning("%d participants share ranking 1", len(indexes))
            for index in indexes:
                placements[index] = ranking
            continue

        scores = {i: participants[i].final_score for i in indexes}
        for index in indexes:
            score = scores[index]
            if score is None:
                placements[index] = ranking
                continue
            ahead = sum(1 for other in scores.values() if other is not None and other > score)
            placements[index] = ranking + ahead

    return placements


def ranking_sort_key(ranking: Any) -> int:
    """Sort key that puts players without a ranking last."""
    return ranking if ranking is not None else MISSING_RANKING_SORT_VALUE
