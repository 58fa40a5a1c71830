"""
Autopick driver for mock drafts.

AutoDrafter advances a DraftSimulator one pick at a time. The caller decides
when to take the next step; stopping is simply not calling it again.
"""

import logging
from typing import List, Optional, Sequence

from ..analysis.pick_context import count_positions, live_board_context
from ..datamodels.draft_state import MockDraftPick
from ..datamodels.player import PlayerPoolEntry
from .draft_simulator import DraftSimulator
from .pick_predictor import PickPredictor

logger = logging.getLogger(__name__)


def realistic_position_needs(roster_positions: Sequence[str], round_number: int) -> List[str]:
    """
    Positions a generic drafter would target this round.

    Targets 1QB, 2RB, 2WR, 2FLEX, 1TE, 1DEF plus bench: skill players early,
    starters and depth through round 10, backups late and a defense last.
    """
    counts = count_positions(roster_positions)
    qb, rb, wr, te, defense = (counts.get(p, 0) for p in ("QB", "RB", "WR", "TE", "DEF"))
    needs = []

    if round_number <= 6:
        if rb < 2 or (rb < 3 and round_number <= 4):
            needs.append("RB")
        if wr < 2 or (wr < 3 and round_number <= 4):
            needs.append("WR")
        if qb == 0 and round_number >= 2:
            needs.append("QB")
        if te == 0 and round_number >= 4:
            needs.append("TE")
    elif round_number <= 10:
        if qb == 0:
            needs.append("QB")
        if rb < 3 or wr >= 3:
            needs.append("RB")
        if wr < 4 or rb >= 2:
            needs.append("WR")
        if te == 0:
            needs.append("TE")
    elif round_number <= 14:
        if qb < 2:
            needs.append("QB")
        needs.extend(["RB", "WR", "TE"])
    else:
        needs.extend(["DEF"] if defense == 0 else ["RB", "WR"])

    return needs or ["RB", "WR"]


def fallback_player(pool: Sequence[PlayerPoolEntry],
                    roster_positions: Sequence[str],
                    round_number: int) -> Optional[PlayerPoolEntry]:
    """Best ADP among realistic needs, else best remaining overall."""
    if not pool:
        return None

    ranked = sorted(pool, key=lambda p: p.adp_rank)
    needs = realistic_position_needs(roster_positions, round_number)
    for player in ranked:
        if player.position in needs:
            return player
    return ranked[0]


class AutoDrafter:
    def __init__(self, predictor: PickPredictor):
        self.predictor = predictor

    def choose_player(self, simulator: DraftSimulator) -> Optional[PlayerPoolEntry]:
        state = simulator.state
        member = simulator.picking_member()
        roster = [p.position for p in simulator.roster_for(member.member_id)]
        round_number = state.current_round

        board = live_board_context(simulator.recent_positions(6), state.player_pool, round_number)
        prediction = self.predictor.predict(
            member.member_id, roster, state.player_pool, round_number, member.draft_slot, board)

        if prediction is not None:
            player = self.predictor.select_player(state.player_pool, prediction)
            if player is not None:
                return player

        if self.predictor.has_model(member.member_id):
            logger.warning(f"No prediction for {member.member_id} at pick {state.current_pick}, "
                           f"using fallback")
        return fallback_player(state.player_pool, roster, round_number)

    def advance_one_pick(self, simulator: DraftSimulator) -> Optional[MockDraftPick]:
        """Make the current pick. Returns None when the draft is complete or the pool is empty."""
        if simulator.is_complete:
            return None

        player = self.choose_player(simulator)
        if player is None:
            logger.warning(f"Player pool exhausted at pick {simulator.state.current_pick}")
            return None
        return simulator.apply_pick(player.player_id, is_auto=True)

    def advance_until(self, simulator: DraftSimulator, member_id: str) -> List[MockDraftPick]:
        """Autopick until ``member_id`` is on the clock (or the draft ends)."""
        picks = []
        remaining = simulator.state.total_picks - simulator.state.current_pick + 1
        for _ in range(max(0, remaining)):
            if simulator.is_complete or simulator.picking_member().member_id == member_id:
                break
            pick = self.advance_one_pick(simulator)
            if pick is None:
                break
            picks.append(pick)
        return picks

    def run_to_completion(self, simulator: DraftSimulator) -> List[MockDraftPick]:
        picks = []
        remaining = simulator.state.total_picks - simulator.state.current_pick + 1
        for _ in range(max(0, remaining)):
            pick = self.advance_one_pick(simulator)
            if pick is None:
                break
            picks.append(pick)
        return picks
