"""
Context reconstruction for individual picks.

Every pick, historical or live, is made with a roster already partly built
and a board that has just seen some run of positions. These helpers rebuild
both views so the profile and behavior builders and the pick predictor all
read the same signals.

Value scoring is pluggable. Without a point-in-time ADP snapshot there is
no honest way to tell a reach from a value, so the default scorer produces
placeholder noise and marks its output as low confidence.
"""

import random
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from ..datamodels.behavior import BoardContext, RosterContext
from ..datamodels.draft_record import DraftRecord, Pick
from ..datamodels.player import PlayerPoolEntry
from ..adp.reconciler import normalize_player_name

RECENT_PICK_WINDOW = 6
RUN_LENGTH = 3


def count_positions(positions: Iterable[str]) -> Dict[str, int]:
    return dict(Counter(positions))


def major_needs(position_counts: Dict[str, int], include_defense: bool = False) -> List[str]:
    """
    Positions a standard starting lineup still lacks.

    Standard needs: 1 QB, 2 RB, 3 WR, 1 TE, and a defense once the draft is
    late enough for it to matter.
    """
    needs = []
    if position_counts.get("QB", 0) == 0:
        needs.append("QB")
    if position_counts.get("RB", 0) < 2:
        needs.append("RB")
    if position_counts.get("WR", 0) < 3:
        needs.append("WR")
    if position_counts.get("TE", 0) == 0:
        needs.append("TE")
    if include_defense and position_counts.get("DEF", 0) == 0:
        needs.append("DEF")
    return needs


def depth_needs(position_counts: Dict[str, int]) -> List[str]:
    needs = []
    if position_counts.get("RB", 0) < 4:
        needs.append("RB")
    if position_counts.get("WR", 0) < 5:
        needs.append("WR")
    if position_counts.get("TE", 0) < 2:
        needs.append("TE")
    return needs


def roster_context(previous_positions: Sequence[str]) -> RosterContext:
    """Roster context for a member given the positions they already drafted."""
    counts = count_positions(previous_positions)
    return RosterContext(
        position_counts=counts,
        major_needs=tuple(major_needs(counts, include_defense=len(previous_positions) > 10)),
        depth_needs=tuple(depth_needs(counts)),
    )


def board_context_from_positions(recent_positions: Sequence[str]) -> BoardContext:
    """
    Historical board context from the positions of the picks just made.

    A run is the last three picks sharing one position; a scarcity alert is
    any position taking three or more of the last six picks.
    """
    window = list(recent_positions)[-RECENT_PICK_WINDOW:]

    runs = ()
    last_three = window[-RUN_LENGTH:]
    if len(last_three) == RUN_LENGTH and len(set(last_three)) == 1:
        runs = (last_three[0],)

    counts = Counter(window)
    alerts = tuple(position for position, count in counts.items() if count >= 3)
    return BoardContext(position_runs=runs, scarcity_alerts=alerts)


def historical_board_context(record: DraftRecord, pick: Pick) -> BoardContext:
    previous = record.picks_before(pick.pick_number)
    return board_context_from_positions([p.position for p in previous])


def live_board_context(recent_positions: Sequence[str],
                       available_pool: Sequence[PlayerPoolEntry],
                       current_round: int,
                       top_n: int = 20) -> BoardContext:
    """
    Board context during a mock draft.

    Three or more of the last six picks at one position is a run, exactly
    two is scarcity. In the first ten rounds a position with two or fewer
    players left among the top of the board is also scarce.
    """
    window = list(recent_positions)[-RECENT_PICK_WINDOW:]
    counts = Counter(window)

    runs = [position for position, count in counts.items() if count >= 3]
    alerts = [position for position, count in counts.items() if count == 2]

    if current_round <= 10:
        top_counts = Counter(p.position for p in sorted(available_pool, key=lambda p: p.adp_rank)[:top_n])
        for position, count in top_counts.items():
            if count <= 2 and position not in alerts and position not in runs:
                alerts.append(position)

    return BoardContext(position_runs=tuple(runs), scarcity_alerts=tuple(sorted(alerts)))


class RandomValueScorer:
    """
    Placeholder value score, uniform over -10..10.

    Positive means value, negative means reach. The numbers carry no
    information about the pick itself.
    """

    confidence = "low"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def score(self, pick: Pick, record: DraftRecord) -> Optional[float]:
        return self.rng.uniform(-10.0, 10.0)


class AdpValueScorer:
    """
    Value score from a point-in-time ADP snapshot.

    The score is how many picks later the player was expected to go than
    where they were taken, divided by the team count so it reads in rounds
    and clamped to -10..10. Players missing from the snapshot score None.
    """

    confidence = "historical"

    def __init__(self, snapshot: Sequence[PlayerPoolEntry]):
        self.snapshot = {
            (normalize_player_name(entry.name), entry.position): entry.average_adp
            for entry in snapshot
        }

    def score(self, pick: Pick, record: DraftRecord) -> Optional[float]:
        adp = self.snapshot.get((normalize_player_name(pick.player_name), pick.position))
        if adp is None:
            return None
        picks_per_round = max(1, record.settings.team_count)
        score = (adp - pick.pick_number) / picks_per_round
        return max(-10.0, min(10.0, score))
