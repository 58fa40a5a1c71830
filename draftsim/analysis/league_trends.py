"""
League-wide draft trends: position runs, per-round position mix and a
round by slot heat map across seasons.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..datamodels.draft_record import DraftRecord, Pick

MIN_RUN_LENGTH = 3
HEAT_MAP_ROUNDS = 15


@dataclass(frozen=True)
class PositionRun:
    position: str
    start_pick: int
    end_pick: int
    pick_count: int
    round: int


@dataclass(frozen=True)
class RoundDistribution:
    round: int
    position_distribution: Dict[str, float]  # percentages
    most_popular_position: str
    total_picks: int


@dataclass(frozen=True)
class HeatMapCell:
    round: int
    draft_slot: int
    position: str
    frequency: float


def identify_position_runs(picks: Sequence[Pick]) -> List[PositionRun]:
    """Runs of three or more consecutive picks at the same position."""
    runs = []
    current = None

    for pick in sorted(picks, key=lambda p: p.pick_number):
        if current and current["position"] == pick.position and pick.pick_number == current["end_pick"] + 1:
            current["end_pick"] = pick.pick_number
            current["pick_count"] += 1
            continue

        if current and current["pick_count"] >= MIN_RUN_LENGTH:
            runs.append(PositionRun(**current))
        current = {
            "position": pick.position,
            "start_pick": pick.pick_number,
            "end_pick": pick.pick_number,
            "pick_count": 1,
            "round": pick.round,
        }

    if current and current["pick_count"] >= MIN_RUN_LENGTH:
        runs.append(PositionRun(**current))

    return runs


def round_distributions(record: DraftRecord) -> List[RoundDistribution]:
    by_round: Dict[int, Counter] = defaultdict(Counter)
    for pick in record.picks:
        by_round[pick.round][pick.position] += 1

    distributions = []
    for rnd in sorted(by_round):
        counts = by_round[rnd]
        total = sum(counts.values())
        distributions.append(RoundDistribution(
            round=rnd,
            position_distribution={pos: count / total * 100 for pos, count in counts.items()},
            most_popular_position=counts.most_common(1)[0][0],
            total_picks=total,
        ))
    return distributions


def draft_heat_map(records: Sequence[DraftRecord]) -> List[HeatMapCell]:
    """
    Position frequency for every (round, slot) over the first fifteen rounds.

    Frequency is the number of drafts in which that slot took that position
    in that round, divided by the number of drafts.
    """
    if not records:
        return []

    counts: Dict[tuple, Counter] = defaultdict(Counter)
    for record in records:
        for pick in record.picks:
            if pick.round <= HEAT_MAP_ROUNDS:
                counts[(pick.round, pick.slot_in_round)][pick.position] += 1

    cells = []
    for (rnd, slot) in sorted(counts):
        for position, count in counts[(rnd, slot)].items():
            cells.append(HeatMapCell(round=rnd, draft_slot=slot, position=position,
                                     frequency=count / len(records)))
    return cells
