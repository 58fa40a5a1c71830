"""
Behavior model construction.

Extends a member profile with the context each historical pick was made in
and compiles it into a BehaviorModel:

1. Baseline probabilities: how often each position was taken in each round
2. Contextual multipliers keyed by slot group, roster need and board state
3. A small decision tree of round, QB-timing, panic and late-round nodes

Everything here is a deterministic function of the records plus the value
scorer. With the default RandomValueScorer the value-derived fields
(thresholds, risk tolerance, late-round label) are noise and the model is
marked ``value_confidence="low"``.
"""

import logging
import math
import random
from collections import Counter, defaultdict
from itertools import combinations
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..datamodels.behavior import (
    AdaptationPatterns, AheadReaction, BehaviorModel, BehindReaction, BoardState, BoardStateCondition,
    ContextualAdjustments, ContextualTendencies, DecisionNode, DraftPerformance, DraftStrategy,
    EnhancedPick, FallbackBehavior, HistoricalDraft, LateRoundBehavior, NeedLevel, RosterNeedCondition,
    RoundCondition, RoundPattern, ScarcityResponse, SituationalPreferences, SlotGroup, SlotPattern,
)
from ..datamodels.draft_record import DraftRecord
from ..datamodels.player import CORE_POSITIONS
from ..datamodels.profile import MemberProfile
from .pick_context import RandomValueScorer, historical_board_context, roster_context

logger = logging.getLogger(__name__)

PATTERN_ROUNDS = range(1, 16)
DECISION_ROUNDS = range(1, 7)
LATE_ROUND_START = 11
LATE_ROUND_END = 15
PANIC_THRESHOLD = 30.0
VALUE_PICK_SCORE = 2.0
REACH_SCORE = -2.0


def _score(pick: EnhancedPick) -> float:
    return pick.value_score if pick.value_score is not None else 0.0


def _most_common(values: Sequence) -> Optional[object]:
    """First value with the highest count, in order of first appearance."""
    if not values:
        return None
    counts = Counter(values)
    best = max(counts.values())
    for value in values:
        if counts[value] == best:
            return value
    return None


class BehaviorModelBuilder:
    """
    Builds a BehaviorModel from a profile and the member's draft records.

    Args:
        value_scorer: Object with ``score(pick, record)`` and a ``confidence``
            label. Defaults to a RandomValueScorer.
        rng: Random source for the default scorer
    """

    def __init__(self, value_scorer=None, rng: Optional[random.Random] = None):
        self.value_scorer = value_scorer or RandomValueScorer(rng)

    def build(self, profile: MemberProfile, records: Sequence[DraftRecord]) -> BehaviorModel:
        member_id = profile.member_id
        drafts = self.extract_historical_drafts(member_id, records)

        tendencies = ContextualTendencies(
            round_patterns=self.analyze_round_patterns(drafts),
            slot_patterns=self.analyze_slot_patterns(drafts),
            situational=self.analyze_situational_preferences(drafts),
        )
        adaptation = self.analyze_adaptation(drafts)

        model = BehaviorModel(
            member_id=member_id,
            baseline_probabilities=self.baseline_probabilities(drafts),
            contextual_adjustments=self.build_contextual_adjustments(tendencies, drafts),
            decision_tree=self.build_decision_tree(profile, tendencies, adaptation),
            tendencies=tendencies,
            adaptation=adaptation,
            historical_drafts=drafts,
            value_confidence=getattr(self.value_scorer, "confidence", "low"),
        )

        logger.info(f"Built behavior model for {member_id}: {len(drafts)} drafts, "
                    f"{len(model.decision_tree)} decision nodes")
        return model

    # ------------------------------------------------------------------
    # Historical drafts
    # ------------------------------------------------------------------

    def extract_historical_drafts(self, member_id: str, records: Sequence[DraftRecord]) -> List[HistoricalDraft]:
        drafts = []

        for record in records:
            member_picks = record.picks_for(member_id)
            if not member_picks:
                continue

            enhanced = []
            for i, pick in enumerate(member_picks):
                enhanced.append(EnhancedPick(
                    pick=pick,
                    value_score=self.value_scorer.score(pick, record),
                    roster_context=roster_context([p.position for p in member_picks[:i]]),
                    board_context=historical_board_context(record, pick),
                ))

            drafts.append(HistoricalDraft(
                year=record.year,
                draft_slot=record.draft_slot_for(member_id),
                total_teams=len(record.draft_order) or record.settings.team_count,
                picks=tuple(enhanced),
                strategy=self.analyze_draft_strategy(enhanced),
                performance=self.calculate_performance(enhanced),
            ))

        return drafts

    def analyze_draft_strategy(self, picks: Sequence[EnhancedPick]) -> DraftStrategy:
        early = [p for p in picks if p.round <= 6]
        rb_count = sum(1 for p in early if p.position == "RB")
        wr_count = sum(1 for p in early if p.position == "WR")

        approach = "BALANCED"
        if rb_count >= 3 and rb_count > wr_count:
            approach = "RB_HEAVY"
        elif wr_count >= 3 and wr_count > rb_count:
            approach = "WR_HEAVY"
        elif rb_count == 0 and wr_count >= 2:
            approach = "ZERO_RB"
        elif rb_count == 1 and wr_count >= 3:
            approach = "HERO_RB"

        qb_round = next((p.round for p in picks if p.position == "QB"), None)
        qb_timing = "VERY_LATE"
        if qb_round is not None:
            if qb_round <= 3:
                qb_timing = "EARLY"
            elif qb_round <= 6:
                qb_timing = "MID"
            elif qb_round <= 10:
                qb_timing = "LATE"

        te_round = next((p.round for p in picks if p.position == "TE"), None)
        te_timing = "STREAM"
        if te_round is not None:
            if te_round <= 3:
                te_timing = "EARLY"
            elif te_round <= 8:
                te_timing = "MID"
            else:
                te_timing = "LATE"

        average = float(np.mean([_score(p) for p in picks])) if picks else 0.0
        risk_tolerance = "MEDIUM"
        if average < -3:
            risk_tolerance = "HIGH"
        elif average > 3:
            risk_tolerance = "LOW"

        reaches = sum(1 for p in picks if _score(p) < REACH_SCORE)
        values = sum(1 for p in picks if _score(p) > VALUE_PICK_SCORE)
        value_focus = "BALANCED"
        if reaches > values * 1.5:
            value_focus = "REACH_HEAVY"
        elif values > reaches * 1.5:
            value_focus = "VALUE_FOCUSED"

        return DraftStrategy(
            early_round_approach=approach,
            qb_timing=qb_timing,
            te_timing=te_timing,
            risk_tolerance=risk_tolerance,
            value_focus=value_focus,
        )

    def calculate_performance(self, picks: Sequence[EnhancedPick]) -> DraftPerformance:
        return DraftPerformance(
            value_pick_count=sum(1 for p in picks if _score(p) > VALUE_PICK_SCORE),
            reach_count=sum(1 for p in picks if _score(p) < REACH_SCORE),
            average_value_score=float(np.mean([_score(p) for p in picks])) if picks else 0.0,
        )

    # ------------------------------------------------------------------
    # Tendencies
    # ------------------------------------------------------------------

    def baseline_probabilities(self, drafts: Sequence[HistoricalDraft]) -> Dict[str, Dict[int, float]]:
        """Share of each position's picks that fell in each round."""
        rounds_by_position: Dict[str, List[int]] = defaultdict(list)
        for draft in drafts:
            for pick in draft.picks:
                rounds_by_position[pick.position].append(pick.round)

        probabilities = {}
        for position, rounds in rounds_by_position.items():
            counts = Counter(rounds)
            probabilities[position] = {rnd: count / len(rounds) for rnd, count in sorted(counts.items())}
        return probabilities

    def analyze_round_patterns(self, drafts: Sequence[HistoricalDraft]) -> Dict[int, RoundPattern]:
        patterns = {}

        for rnd in PATTERN_ROUNDS:
            round_picks = [p for d in drafts for p in d.picks if p.round == rnd]
            if not round_picks:
                continue

            counts = Counter(p.position for p in round_picks)
            preferences = {position: count / len(round_picks) for position, count in counts.items()}

            scored = [p.value_score for p in round_picks if p.value_score is not None]
            threshold = float(np.mean(scored)) if scored else 0.0

            top_position = max(preferences, key=preferences.get)
            typical = "POSITIONAL_NEED"
            if rnd <= 6 and top_position in ("RB", "WR"):
                typical = "SKILL_POSITION_FOCUS"
            elif rnd <= 3 and top_position == "QB":
                typical = "EARLY_QB"
            elif rnd >= LATE_ROUND_START:
                typical = "DEPTH_AND_SPECIALS"

            patterns[rnd] = RoundPattern(
                position_preferences=preferences,
                value_threshold=threshold,
                typical_strategy=typical,
            )

        return patterns

    def _group_by_slot(self, drafts: Sequence[HistoricalDraft]) -> Dict[SlotGroup, List[HistoricalDraft]]:
        # Drafts with no known slot are left out of slot-based analysis
        groups: Dict[SlotGroup, List[HistoricalDraft]] = {group: [] for group in SlotGroup}
        for draft in drafts:
            if draft.draft_slot > 0:
                groups[SlotGroup.for_slot(draft.draft_slot)].append(draft)
        return groups

    def analyze_slot_patterns(self, drafts: Sequence[HistoricalDraft]) -> Dict[SlotGroup, SlotPattern]:
        patterns = {}

        for group, group_drafts in self._group_by_slot(drafts).items():
            if not group_drafts:
                continue

            approach = _most_common([d.strategy.early_round_approach for d in group_drafts])
            qb_timing = _most_common([d.strategy.qb_timing for d in group_drafts])

            shift = "CONSISTENT"
            if group == SlotGroup.EARLY and approach == "RB_HEAVY":
                shift = "CAPITALIZE_ON_ELITE_RBS"
            elif group == SlotGroup.LATE and approach == "WR_HEAVY":
                shift = "CAPITALIZE_ON_WR_VALUE"
            elif qb_timing == "EARLY":
                shift = "SECURE_PREMIUM_QB"

            counts = Counter(p.position for d in group_drafts for p in d.picks if p.round <= 4)
            # Counter.most_common keeps insertion order between equal counts
            priorities = [position for position, _ in counts.most_common()]

            average = float(np.mean([d.performance.average_value_score for d in group_drafts]))
            risk = abs(average) * 10 if abs(average) > 2 else 50.0

            patterns[group] = SlotPattern(
                strategy_shift=shift,
                position_priorities=priorities,
                risk_tolerance=min(100.0, risk),
            )

        return patterns

    def analyze_situational_preferences(self, drafts: Sequence[HistoricalDraft]) -> SituationalPreferences:
        picks = [p for d in drafts for p in d.picks]
        when_behind = {}
        when_ahead = {}

        for position in CORE_POSITIONS:
            panic = wait = adapt = 0
            for pick in picks:
                if position not in pick.roster_context.major_needs:
                    continue
                if pick.position != position:
                    wait += 1
                elif position in pick.board_context.scarcity_alerts:
                    panic += 1
                else:
                    adapt += 1

            if panic + wait + adapt:
                if panic > wait and panic > adapt:
                    when_behind[position] = BehindReaction.PANIC
                elif wait > panic and wait > adapt:
                    when_behind[position] = BehindReaction.WAIT
                else:
                    when_behind[position] = BehindReaction.ADAPT

            keep = value_hunt = diversify = 0
            for pick in picks:
                count = pick.roster_context.count(position)
                if count < 2 or position in pick.roster_context.major_needs:
                    continue
                if pick.position == position:
                    keep += 1
                elif _score(pick) > VALUE_PICK_SCORE:
                    value_hunt += 1
                else:
                    diversify += 1

            if keep + value_hunt + diversify:
                if keep > diversify and keep > value_hunt:
                    when_ahead[position] = AheadReaction.CONTINUE
                elif value_hunt > keep and value_hunt > diversify:
                    when_ahead[position] = AheadReaction.VALUE_HUNT
                else:
                    when_ahead[position] = AheadReaction.DIVERSIFY

        late_picks = [p for p in picks if p.round >= LATE_ROUND_START]
        upside = sum(1 for p in late_picks if _score(p) < -1)
        safe = len(late_picks) - upside

        late_behavior = LateRoundBehavior.BALANCED
        if safe > upside * 1.5:
            late_behavior = LateRoundBehavior.SAFE_DEPTH
        elif upside > safe * 1.5:
            late_behavior = LateRoundBehavior.HIGH_UPSIDE

        return SituationalPreferences(
            when_behind=when_behind,
            when_ahead=when_ahead,
            late_round_behavior=late_behavior,
        )

    # ------------------------------------------------------------------
    # Adaptation
    # ------------------------------------------------------------------

    def analyze_adaptation(self, drafts: Sequence[HistoricalDraft]) -> AdaptationPatterns:
        variation = {
            group: self.strategy_variation(group_drafts)
            for group, group_drafts in self._group_by_slot(drafts).items()
        }

        return AdaptationPatterns(
            slot_group_variation=variation,
            board_flow_adaptation=self.board_flow_adaptation(drafts),
            strategic_consistency=self.strategic_consistency(drafts),
            adaptability_score=self.adaptability_score(drafts),
            scarcity_response=self.analyze_scarcity_response(drafts),
        )

    def strategy_variation(self, drafts: Sequence[HistoricalDraft]) -> float:
        """Mean share of differing strategy traits across draft pairs, 0-100."""
        if len(drafts) <= 1:
            return 0.0

        scores = []
        for first, second in combinations([d.strategy for d in drafts], 2):
            differences = sum([
                first.early_round_approach != second.early_round_approach,
                first.qb_timing != second.qb_timing,
                first.te_timing != second.te_timing,
                first.risk_tolerance != second.risk_tolerance,
            ])
            scores.append(differences / 4)

        return float(np.mean(scores)) * 100

    def strategic_consistency(self, drafts: Sequence[HistoricalDraft]) -> float:
        if len(drafts) <= 1:
            return 100.0

        scores = []
        for first, second in combinations([d.strategy for d in drafts], 2):
            matches = sum([
                first.early_round_approach == second.early_round_approach,
                first.qb_timing == second.qb_timing,
                first.te_timing == second.te_timing,
                first.risk_tolerance == second.risk_tolerance,
                first.value_focus == second.value_focus,
            ])
            scores.append(matches / 5 * 100)

        return float(np.mean(scores))

    def adaptability_score(self, drafts: Sequence[HistoricalDraft]) -> float:
        score = 50.0
        slot_bands = {math.ceil(d.draft_slot / 4) for d in drafts}
        score += len(slot_bands) * 10

        variation = self.strategy_variation(drafts)
        if 30 < variation < 70:
            score += 20

        return min(100.0, score)

    def board_flow_adaptation(self, drafts: Sequence[HistoricalDraft]) -> float:
        """Percentage of picks (after each draft's first) made under a scarcity alert."""
        opportunities = 0
        adapted = 0
        for draft in drafts:
            for pick in draft.picks[1:]:
                opportunities += 1
                if pick.board_context.scarcity_alerts:
                    adapted += 1

        return adapted / opportunities * 100 if opportunities else 50.0

    def analyze_scarcity_response(self, drafts: Sequence[HistoricalDraft]) -> ScarcityResponse:
        reaction = {}

        for position in CORE_POSITIONS:
            opportunities = 0
            panic_picks = 0
            for draft in drafts:
                for pick in draft.picks:
                    board = pick.board_context
                    if position in board.position_runs or position in board.scarcity_alerts:
                        opportunities += 1
                        if pick.position == position:
                            panic_picks += 1

            if opportunities:
                reaction[position] = panic_picks / opportunities * 100

        return ScarcityResponse(position_run_reaction=reaction)

    # ------------------------------------------------------------------
    # Predictive model
    # ------------------------------------------------------------------

    def build_contextual_adjustments(self,
                                     tendencies: ContextualTendencies,
                                     drafts: Sequence[HistoricalDraft]) -> ContextualAdjustments:
        slot_multipliers: Dict[SlotGroup, Dict[str, float]] = {group: {} for group in SlotGroup}
        for group, pattern in tendencies.slot_patterns.items():
            for rank, position in enumerate(pattern.position_priorities):
                slot_multipliers[group][position] = max(0.5, 2.0 - rank * 0.3)

        need_counts: Dict[NeedLevel, Counter] = {level: Counter() for level in NeedLevel}
        board_counts: Dict[BoardState, Counter] = {state: Counter() for state in BoardState}
        total_picks = 0

        for draft in drafts:
            for pick in draft.picks:
                total_picks += 1
                roster = pick.roster_context
                if pick.position in roster.major_needs:
                    level = NeedLevel.DESPERATE if roster.count(pick.position) == 0 else NeedLevel.NEED
                elif pick.position in roster.depth_needs:
                    level = NeedLevel.SATISFIED
                else:
                    level = NeedLevel.DEEP
                need_counts[level][pick.position] += 1
                board_counts[pick.board_context.overall_state][pick.position] += 1

        roster_multipliers = {
            level: {position: max(0.1, count / total_picks * 10) for position, count in counts.items()}
            for level, counts in need_counts.items()
        }

        board_multipliers = {}
        for state, counts in board_counts.items():
            state_total = sum(counts.values())
            board_multipliers[state] = {
                position: count / state_total * 4 for position, count in counts.items()
            } if state_total else {}

        return ContextualAdjustments(
            draft_slot=slot_multipliers,
            roster_need=roster_multipliers,
            board_state=board_multipliers,
        )

    def build_decision_tree(self,
                            profile: MemberProfile,
                            tendencies: ContextualTendencies,
                            adaptation: AdaptationPatterns) -> List[DecisionNode]:
        tree = []

        for rnd in DECISION_ROUNDS:
            pattern = tendencies.round_patterns.get(rnd)
            if pattern is None:
                continue

            ranked = pattern.ranked_positions()
            top_share = pattern.position_preferences[ranked[0]] if ranked else 0.5
            tree.append(DecisionNode(
                conditions=(RoundCondition(rnd, rnd),),
                preferred_positions=tuple(ranked[:3]),
                confidence=min(0.9, top_share),
                fallback_behavior=FallbackBehavior.BEST_AVAILABLE,
                value_threshold=pattern.value_threshold,
            ))

        qb_timing = profile.position_timing.get("QB")
        if qb_timing is not None:
            tree.append(DecisionNode(
                conditions=(
                    RoundCondition(math.floor(qb_timing.average_round) - 1, math.ceil(qb_timing.average_round) + 1),
                    RosterNeedCondition(("QB",)),
                ),
                preferred_positions=("QB",),
                confidence=max(0.3, 1.0 - qb_timing.std_deviation / 10),
                fallback_behavior=FallbackBehavior.NEED_BASED,
            ))

        for position, probability in adaptation.scarcity_response.position_run_reaction.items():
            if probability < PANIC_THRESHOLD:
                continue
            tree.append(DecisionNode(
                conditions=(
                    BoardStateCondition(position, BoardState.RUN_ACTIVE),
                    RosterNeedCondition((position,)),
                ),
                preferred_positions=(position,),
                confidence=probability / 100,
                fallback_behavior=FallbackBehavior.NEED_BASED,
            ))

        late_fallback = FallbackBehavior.BEST_AVAILABLE
        if tendencies.situational.late_round_behavior == LateRoundBehavior.HIGH_UPSIDE:
            late_fallback = FallbackBehavior.VALUE_HUNT
        tree.append(DecisionNode(
            conditions=(RoundCondition(LATE_ROUND_START, LATE_ROUND_END),),
            preferred_positions=(),
            confidence=0.7,
            fallback_behavior=late_fallback,
            value_threshold=VALUE_PICK_SCORE,
        ))

        return tree
