"""
Member draft profile aggregation.

Builds a MemberProfile from every historical draft a member took part in:
first-occurrence round per position, position timing statistics, timing
consistency, year-by-year strategy labels and round-10 roster construction.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Sequence

import numpy as np

from ..datamodels.draft_record import DraftRecord
from ..datamodels.player import CORE_POSITIONS, TRACKED_POSITIONS
from ..datamodels.profile import (
    ConsistencyMetrics, DraftStrategyLabel, DraftSummary, MemberProfile, PositionTiming,
    RosterConstructionStats, RosterPattern, StrategyEvolution,
)

logger = logging.getLogger(__name__)

ROSTER_CENSUS_ROUND = 10
STRATEGY_ROUNDS = 5
# Sentinel round for a member who never drafted a QB
NO_QB_ROUND = 99


def record_fingerprint(records: Sequence[DraftRecord]) -> tuple:
    """Identity of a record set: draft ids plus pick counts, in a stable order."""
    return tuple(sorted(f"{r.draft_id}:{len(r.picks)}" for r in records))


class ProfileBuilder:
    """
    Aggregates a member's historical picks into a MemberProfile.

    The builder is stateless; caching is the caller's concern (see
    ProfileCache).
    """

    def build(self, member_id: str, records: Sequence[DraftRecord]) -> MemberProfile:
        summaries = self.summarize_drafts(member_id, records)

        profile = MemberProfile(
            member_id=member_id,
            draft_summaries=summaries,
            position_timing=self.calculate_position_timing(summaries),
            consistency=self.calculate_consistency(summaries),
            roster_construction=self.calculate_roster_construction(summaries),
            record_fingerprint=record_fingerprint(records),
        )

        logger.info(f"Built draft profile for {member_id} from {profile.draft_count} drafts")
        return profile

    def summarize_drafts(self, member_id: str, records: Sequence[DraftRecord]) -> List[DraftSummary]:
        summaries = []

        for record in records:
            picks = record.picks_for(member_id)
            if not picks:
                continue

            first_rounds: Dict[str, int] = {}
            census: Dict[str, int] = {}
            for pick in picks:
                first_rounds.setdefault(pick.position, pick.round)
                if pick.round <= ROSTER_CENSUS_ROUND:
                    census[pick.position] = census.get(pick.position, 0) + 1

            summaries.append(DraftSummary(
                draft_id=record.draft_id,
                year=record.year,
                league=record.league,
                draft_slot=record.draft_slot_for(member_id),
                picks=tuple(picks),
                first_position_rounds=first_rounds,
                roster_by_round10=census,
            ))

        return summaries

    def _first_rounds(self, summaries: Sequence[DraftSummary], position: str) -> List[int]:
        return [s.first_position_rounds[position] for s in summaries if position in s.first_position_rounds]

    def calculate_position_timing(self, summaries: Sequence[DraftSummary]) -> Dict[str, PositionTiming]:
        timing = {}

        for position in TRACKED_POSITIONS:
            rounds = self._first_rounds(summaries, position)
            if not rounds:
                continue

            timing[position] = PositionTiming(
                average_round=float(np.mean(rounds)),
                std_deviation=float(np.std(rounds)),
                earliest_round=min(rounds),
                latest_round=max(rounds),
                observations=len(rounds),
            )

        return timing

    def calculate_consistency(self, summaries: Sequence[DraftSummary]) -> ConsistencyMetrics:
        """
        Timing consistency per position, 0-100.

        Positions seen in fewer than two drafts are left out: a single
        observation has no spread to measure.
        """
        position_scores = {}
        for position in TRACKED_POSITIONS:
            rounds = self._first_rounds(summaries, position)
            if len(rounds) < 2:
                continue
            position_scores[position] = max(0.0, 100.0 - float(np.std(rounds)) * 20)

        positive = [score for score in position_scores.values() if score > 0]
        overall = float(np.mean(positive)) if positive else 0.0

        return ConsistencyMetrics(
            overall_score=overall,
            position_scores=position_scores,
            strategy_evolution=self.analyze_strategy_evolution(summaries),
        )

    def classify_strategy(self, summary: DraftSummary) -> StrategyEvolution:
        early = [p for p in summary.picks if p.round <= STRATEGY_ROUNDS]
        rb_count = sum(1 for p in early if p.position == "RB")
        wr_count = sum(1 for p in early if p.position == "WR")
        qb_round = summary.first_position_rounds.get("QB", NO_QB_ROUND)

        strategy, confidence = DraftStrategyLabel.BALANCED, 0.5
        if rb_count >= 3 and rb_count > wr_count:
            strategy, confidence = DraftStrategyLabel.RB_HEAVY, 0.8
        elif wr_count >= 3 and wr_count > rb_count:
            strategy, confidence = DraftStrategyLabel.WR_HEAVY, 0.8
        elif rb_count == 0 and wr_count >= 2:
            strategy, confidence = DraftStrategyLabel.ZERO_RB, 0.9
        elif rb_count == 1 and wr_count >= 3:
            strategy, confidence = DraftStrategyLabel.HERO_RB, 0.7

        # QB timing overrides the RB/WR label
        if qb_round <= 3:
            strategy, confidence = DraftStrategyLabel.EARLY_QB, 0.9
        elif qb_round >= 8:
            strategy, confidence = DraftStrategyLabel.LATE_QB, 0.8

        return StrategyEvolution(year=summary.year, strategy=strategy, confidence=confidence)

    def analyze_strategy_evolution(self, summaries: Sequence[DraftSummary]) -> List[StrategyEvolution]:
        ordered = sorted(summaries, key=lambda s: s.year)
        return [self.classify_strategy(summary) for summary in ordered]

    def calculate_roster_construction(self, summaries: Sequence[DraftSummary]) -> RosterConstructionStats:
        average_by_position = {
            position: float(np.mean([s.roster_by_round10.get(position, 0) for s in summaries])) if summaries else 0.0
            for position in TRACKED_POSITIONS
        }

        patterns: "OrderedDict[str, List[str]]" = OrderedDict()
        for summary in summaries:
            pattern = roster_pattern(summary.roster_by_round10)
            patterns.setdefault(pattern, []).append(summary.year)

        most_common = ""
        max_count = 0
        for pattern, years in patterns.items():
            if len(years) > max_count:
                max_count = len(years)
                most_common = pattern

        roster_patterns = sorted(
            (RosterPattern(pattern=p, frequency=len(years) / len(summaries), years=years)
             for p, years in patterns.items()),
            key=lambda rp: rp.frequency,
            reverse=True,
        )

        return RosterConstructionStats(
            average_by_position=average_by_position,
            most_common_construction=most_common,
            patterns=roster_patterns,
        )


def roster_pattern(census: Dict[str, int]) -> str:
    """Pattern string such as ``1QB-3RB-4WR-1TE`` for the nonzero core positions."""
    pattern = "-".join(f"{census[pos]}{pos}" for pos in CORE_POSITIONS if census.get(pos, 0) > 0)
    return pattern or "UNKNOWN"


def compare_profiles(first: MemberProfile, second: MemberProfile) -> float:
    """
    Similarity between two members, 0-100.

    Each shared core position contributes a timing score (10 points lost per
    round of difference in average first pick) and every core position
    contributes a roster score (25 points lost per player of difference in
    the round-10 average).
    """
    scores = []

    for position in CORE_POSITIONS:
        timing1 = first.position_timing.get(position)
        timing2 = second.position_timing.get(position)
        if timing1 and timing2:
            difference = abs(timing1.average_round - timing2.average_round)
            scores.append(max(0.0, 100.0 - difference * 10))

    for position in CORE_POSITIONS:
        avg1 = first.roster_construction.average_by_position.get(position, 0.0)
        avg2 = second.roster_construction.average_by_position.get(position, 0.0)
        scores.append(max(0.0, 100.0 - abs(avg1 - avg2) * 25))

    return float(np.mean(scores)) if scores else 0.0
