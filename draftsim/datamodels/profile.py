"""
Member profile models.

A MemberProfile summarizes everything a member has done across the
historical drafts they took part in: when they first take each position,
how consistent that timing is, which early-round strategy they used each
year and what their roster looks like after ten rounds.

Profiles are derived data. They are rebuilt whenever the underlying record
set changes and are otherwise treated as immutable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from .draft_record import Pick


class DraftStrategyLabel(str, Enum):
    RB_HEAVY = "RB_HEAVY"
    WR_HEAVY = "WR_HEAVY"
    BALANCED = "BALANCED"
    ZERO_RB = "ZERO_RB"
    HERO_RB = "HERO_RB"
    EARLY_QB = "EARLY_QB"
    LATE_QB = "LATE_QB"


@dataclass(frozen=True)
class DraftSummary:
    """One member's picks in one historical draft."""

    draft_id: str
    year: str
    league: str
    draft_slot: int
    picks: Tuple[Pick, ...]
    first_position_rounds: Dict[str, int]  # position -> first round taken
    roster_by_round10: Dict[str, int]      # position -> count through round 10


@dataclass(frozen=True)
class PositionTiming:
    average_round: float
    std_deviation: float
    earliest_round: int
    latest_round: int
    observations: int


@dataclass(frozen=True)
class StrategyEvolution:
    year: str
    strategy: DraftStrategyLabel
    confidence: float


@dataclass(frozen=True)
class ConsistencyMetrics:
    overall_score: float
    position_scores: Dict[str, float]
    strategy_evolution: List[StrategyEvolution]


@dataclass(frozen=True)
class RosterPattern:
    pattern: str       # e.g. "1QB-3RB-4WR-1TE"
    frequency: float   # share of the member's drafts
    years: List[str]


@dataclass(frozen=True)
class RosterConstructionStats:
    average_by_position: Dict[str, float]
    most_common_construction: str
    patterns: List[RosterPattern]


@dataclass(frozen=True)
class MemberProfile:
    member_id: str
    draft_summaries: List[DraftSummary]
    position_timing: Dict[str, PositionTiming]
    consistency: ConsistencyMetrics
    roster_construction: RosterConstructionStats
    record_fingerprint: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def draft_count(self) -> int:
        return len(self.draft_summaries)

    @property
    def is_empty(self) -> bool:
        return not self.draft_summaries

    def summary(self) -> Dict:
        """Plain-dict view used by the API layer."""
        return {
            "member_id": self.member_id,
            "draft_count": self.draft_count,
            "position_timing": {
                position: {
                    "average_round": timing.average_round,
                    "std_deviation": timing.std_deviation,
                    "earliest_round": timing.earliest_round,
                    "latest_round": timing.latest_round,
                }
                for position, timing in self.position_timing.items()
            },
            "consistency": {
                "overall_score": self.consistency.overall_score,
                "position_scores": dict(self.consistency.position_scores),
                "strategy_evolution": [
                    {"year": e.year, "strategy": e.strategy.value, "confidence": e.confidence}
                    for e in self.consistency.strategy_evolution
                ],
            },
            "roster_construction": {
                "average_by_position": dict(self.roster_construction.average_by_position),
                "most_common_construction": self.roster_construction.most_common_construction,
                "patterns": [
                    {"pattern": p.pattern, "frequency": p.frequency, "years": list(p.years)}
                    for p in self.roster_construction.patterns
                ],
            },
        }
