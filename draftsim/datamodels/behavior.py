"""
Behavior model data structures.

These models capture how a member reacts to draft context: which positions
they favor in a given round, how their draft slot shifts their plan, how
they respond to runs and scarcity, and the compiled predictive model that
the pick predictor evaluates at draft time.

Decision tree conditions are a closed set of condition types. Every node
holds a tuple of conditions that must all match.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .draft_record import Pick


class SlotGroup(str, Enum):
    EARLY = "early"
    MID = "mid"
    LATE = "late"

    @classmethod
    def for_slot(cls, draft_slot: int) -> "SlotGroup":
        if draft_slot <= 4:
            return cls.EARLY
        if draft_slot <= 8:
            return cls.MID
        return cls.LATE


class NeedLevel(str, Enum):
    DESPERATE = "desperate"
    NEED = "need"
    SATISFIED = "satisfied"
    DEEP = "deep"


class BoardState(str, Enum):
    RUN_ACTIVE = "run_active"
    SCARCITY_HIGH = "scarcity_high"
    NORMAL = "normal"


class FallbackBehavior(str, Enum):
    BEST_AVAILABLE = "BEST_AVAILABLE"
    NEED_BASED = "NEED_BASED"
    VALUE_HUNT = "VALUE_HUNT"


class BehindReaction(str, Enum):
    PANIC = "PANIC"
    WAIT = "WAIT"
    ADAPT = "ADAPT"


class AheadReaction(str, Enum):
    CONTINUE = "CONTINUE"
    DIVERSIFY = "DIVERSIFY"
    VALUE_HUNT = "VALUE_HUNT"


class LateRoundBehavior(str, Enum):
    SAFE_DEPTH = "SAFE_DEPTH"
    HIGH_UPSIDE = "HIGH_UPSIDE"
    BALANCED = "BALANCED"


# ---------------------------------------------------------------------------
# Pick context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RosterContext:
    position_counts: Dict[str, int]
    major_needs: Tuple[str, ...]
    depth_needs: Tuple[str, ...]

    def count(self, position: str) -> int:
        return self.position_counts.get(position, 0)


@dataclass(frozen=True)
class BoardContext:
    position_runs: Tuple[str, ...] = ()
    scarcity_alerts: Tuple[str, ...] = ()

    def state_for(self, position: str) -> BoardState:
        """Board state as seen from one position."""
        if position in self.position_runs:
            return BoardState.RUN_ACTIVE
        if position in self.scarcity_alerts:
            return BoardState.SCARCITY_HIGH
        return BoardState.NORMAL

    @property
    def overall_state(self) -> BoardState:
        if self.position_runs:
            return BoardState.RUN_ACTIVE
        if self.scarcity_alerts:
            return BoardState.SCARCITY_HIGH
        return BoardState.NORMAL


@dataclass(frozen=True)
class EnhancedPick:
    """A historical pick annotated with the context it was made in."""

    pick: Pick
    value_score: Optional[float]  # positive = value, negative = reach
    roster_context: RosterContext
    board_context: BoardContext

    @property
    def round(self) -> int:
        return self.pick.round

    @property
    def position(self) -> str:
        return self.pick.position


@dataclass(frozen=True)
class DraftStrategy:
    early_round_approach: str  # RB_HEAVY / WR_HEAVY / BALANCED / ZERO_RB / HERO_RB
    qb_timing: str             # EARLY / MID / LATE / VERY_LATE
    te_timing: str             # EARLY / MID / LATE / STREAM
    risk_tolerance: str        # HIGH / MEDIUM / LOW
    value_focus: str           # REACH_HEAVY / BALANCED / VALUE_FOCUSED


@dataclass(frozen=True)
class DraftPerformance:
    value_pick_count: int
    reach_count: int
    average_value_score: float


@dataclass(frozen=True)
class HistoricalDraft:
    year: str
    draft_slot: int
    total_teams: int
    picks: Tuple[EnhancedPick, ...]
    strategy: DraftStrategy
    performance: DraftPerformance


# ---------------------------------------------------------------------------
# Contextual tendencies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RoundPattern:
    position_preferences: Dict[str, float]  # position -> share of picks in round
    value_threshold: float
    typical_strategy: str

    def ranked_positions(self) -> List[str]:
        return [p for p, _ in sorted(self.position_preferences.items(), key=lambda kv: kv[1], reverse=True)]


@dataclass(frozen=True)
class SlotPattern:
    strategy_shift: str
    position_priorities: List[str]
    risk_tolerance: float


@dataclass(frozen=True)
class SituationalPreferences:
    when_behind: Dict[str, BehindReaction]
    when_ahead: Dict[str, AheadReaction]
    late_round_behavior: LateRoundBehavior


@dataclass(frozen=True)
class ContextualTendencies:
    round_patterns: Dict[int, RoundPattern]
    slot_patterns: Dict[SlotGroup, SlotPattern]
    situational: SituationalPreferences


@dataclass(frozen=True)
class ScarcityResponse:
    position_run_reaction: Dict[str, float]  # position -> panic pick percentage (0-100)


@dataclass(frozen=True)
class AdaptationPatterns:
    slot_group_variation: Dict[SlotGroup, float]
    board_flow_adaptation: float
    strategic_consistency: float
    adaptability_score: float
    scarcity_response: ScarcityResponse


# ---------------------------------------------------------------------------
# Decision tree
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RoundCondition:
    first: int
    last: int

    def matches_round(self, round_number: int) -> bool:
        return self.first <= round_number <= self.last


@dataclass(frozen=True)
class SlotGroupCondition:
    group: SlotGroup


@dataclass(frozen=True)
class RosterNeedCondition:
    positions: Tuple[str, ...]


@dataclass(frozen=True)
class BoardStateCondition:
    position: str
    state: BoardState


DecisionCondition = Union[RoundCondition, SlotGroupCondition, RosterNeedCondition, BoardStateCondition]


@dataclass(frozen=True)
class DecisionNode:
    conditions: Tuple[DecisionCondition, ...]
    preferred_positions: Tuple[str, ...]
    confidence: float
    fallback_behavior: FallbackBehavior = FallbackBehavior.BEST_AVAILABLE
    value_threshold: Optional[float] = None


@dataclass(frozen=True)
class ContextualAdjustments:
    draft_slot: Dict[SlotGroup, Dict[str, float]]
    roster_need: Dict[NeedLevel, Dict[str, float]]
    board_state: Dict[BoardState, Dict[str, float]]


@dataclass(frozen=True)
class BehaviorModel:
    member_id: str
    baseline_probabilities: Dict[str, Dict[int, float]]
    contextual_adjustments: ContextualAdjustments
    decision_tree: List[DecisionNode]
    tendencies: ContextualTendencies
    adaptation: AdaptationPatterns
    historical_drafts: List[HistoricalDraft] = field(default_factory=list)
    # "low" while value scores come from the placeholder scorer
    value_confidence: str = "low"

    def baseline(self, position: str, round_number: int, floor: float = 0.01) -> float:
        probability = self.baseline_probabilities.get(position, {}).get(round_number)
        return probability if probability else floor
