"""
Member-specific pick prediction.

Scores every position still present in the pool against a member's
behavior model, then picks a concrete player at the winning position. All
randomness comes from the injected ``random.Random`` so a seeded predictor
replays the same draft.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from ..analysis.pick_context import count_positions, major_needs
from ..datamodels.behavior import (
    BehaviorModel, BoardContext, BoardStateCondition, DecisionCondition, NeedLevel, RosterNeedCondition,
    RoundCondition, SlotGroup, SlotGroupCondition,
)
from ..datamodels.player import PlayerPoolEntry

logger = logging.getLogger(__name__)

BASELINE_FLOOR = 0.01
MIN_PROBABILITY = 0.001
MAX_CONFIDENCE = 0.95
CANDIDATE_DEPTH = 5


@dataclass(frozen=True)
class Prediction:
    position: str
    confidence: float
    probabilities: Dict[str, float]


def need_level(position: str, position_counts: Mapping[str, int], needs: Sequence[str]) -> NeedLevel:
    count = position_counts.get(position, 0)
    if position in needs:
        return NeedLevel.DESPERATE if count == 0 else NeedLevel.NEED
    if count >= 3:
        return NeedLevel.DEEP
    return NeedLevel.SATISFIED


def condition_matches(condition: DecisionCondition,
                      round_number: int,
                      slot_group: SlotGroup,
                      needs: Sequence[str],
                      board_context: BoardContext) -> bool:
    if isinstance(condition, RoundCondition):
        return condition.matches_round(round_number)
    if isinstance(condition, SlotGroupCondition):
        return condition.group == slot_group
    if isinstance(condition, RosterNeedCondition):
        return any(position in needs for position in condition.positions)
    if isinstance(condition, BoardStateCondition):
        return board_context.state_for(condition.position) == condition.state
    raise TypeError(f"Unknown decision condition: {type(condition).__name__}")


class PickPredictor:
    """
    Predicts the next position a member will draft.

    Args:
        models: Behavior models keyed by member id
        rng: Random source for player selection
    """

    def __init__(self, models: Mapping[str, BehaviorModel], rng: Optional[random.Random] = None):
        self.models = dict(models)
        self.rng = rng or random.Random()

    def has_model(self, member_id: str) -> bool:
        return member_id in self.models

    def predict(self,
                member_id: str,
                roster_so_far: Sequence[str],
                available_pool: Sequence[PlayerPoolEntry],
                round_number: int,
                draft_slot: int,
                board_context: Optional[BoardContext] = None) -> Optional[Prediction]:
        """
        Most probable position for the member's next pick.

        Args:
            member_id: Member on the clock
            roster_so_far: Positions the member has already drafted
            available_pool: Players still on the board
            round_number: Current round (1-based)
            draft_slot: Member's draft slot (1-based)
            board_context: Recent runs and scarcity on the board

        Returns:
            Prediction, or None when the member has no model or the pool is empty
        """
        model = self.models.get(member_id)
        if model is None or not available_pool:
            return None

        board_context = board_context or BoardContext()
        counts = count_positions(roster_so_far)
        needs = major_needs(counts, include_defense=round_number > 10)
        slot_group = SlotGroup.for_slot(draft_slot)
        adjustments = model.contextual_adjustments

        matching_nodes = [
            node for node in model.decision_tree
            if all(condition_matches(c, round_number, slot_group, needs, board_context) for c in node.conditions)
        ]

        # Positions in order of first appearance on the board
        positions: List[str] = []
        for player in available_pool:
            if player.position not in positions:
                positions.append(player.position)

        probabilities = {}
        for position in positions:
            probability = model.baseline(position, round_number, floor=BASELINE_FLOOR)
            probability *= adjustments.draft_slot.get(slot_group, {}).get(position) or 1.0
            probability *= adjustments.roster_need.get(need_level(position, counts, needs), {}).get(position) or 1.0
            probability *= adjustments.board_state.get(board_context.state_for(position), {}).get(position) or 1.0

            for node in matching_nodes:
                if position in node.preferred_positions:
                    probability *= 1 + node.confidence

            probabilities[position] = max(MIN_PROBABILITY, probability)

        top_position = max(positions, key=lambda p: probabilities[p])
        total = sum(probabilities.values())
        confidence = min(MAX_CONFIDENCE, probabilities[top_position] / total) if total > 0 else 0.0

        logger.debug(f"Predicted {top_position} for {member_id} in round {round_number} "
                     f"(confidence {confidence:.2f})")
        return Prediction(position=top_position, confidence=confidence, probabilities=probabilities)

    def select_player(self,
                      available_pool: Sequence[PlayerPoolEntry],
                      prediction: Prediction) -> Optional[PlayerPoolEntry]:
        """
        Choose a player at the predicted position.

        High confidence takes the best ADP; lower confidence spreads the
        choice across the top two or three candidates.
        """
        candidates = sorted(
            (p for p in available_pool if p.position == prediction.position),
            key=lambda p: p.adp_rank,
        )[:CANDIDATE_DEPTH]
        if not candidates:
            return None

        if prediction.confidence > 0.8:
            return candidates[0]
        if prediction.confidence > 0.6:
            index = 0 if self.rng.random() < 0.7 else min(1, len(candidates) - 1)
            return candidates[index]
        return candidates[self.rng.randrange(min(3, len(candidates)))]
