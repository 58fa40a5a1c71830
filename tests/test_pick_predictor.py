"""
Tests for member-specific pick prediction.
"""

import random

import pytest

from draftsim.analysis.behavior_model import BehaviorModelBuilder
from draftsim.analysis.profile_builder import ProfileBuilder
from draftsim.datamodels.behavior import (
    AdaptationPatterns, BehaviorModel, BoardContext, BoardState, BoardStateCondition, ContextualAdjustments,
    ContextualTendencies, DecisionNode, LateRoundBehavior, NeedLevel, RosterNeedCondition, RoundCondition,
    ScarcityResponse, SituationalPreferences, SlotGroup, SlotGroupCondition,
)
from draftsim.datamodels.player import PlayerPoolEntry
from draftsim.simulation.pick_predictor import PickPredictor, Prediction, condition_matches, need_level


def player(player_id, position, rank):
    return PlayerPoolEntry(player_id=player_id, name=player_id, position=position, adp_rank=rank,
                           average_adp=float(rank))


def make_model(baseline, tree=(), draft_slot=None):
    return BehaviorModel(
        member_id="m",
        baseline_probabilities=baseline,
        contextual_adjustments=ContextualAdjustments(draft_slot=draft_slot or {}, roster_need={}, board_state={}),
        decision_tree=list(tree),
        tendencies=ContextualTendencies(
            round_patterns={},
            slot_patterns={},
            situational=SituationalPreferences({}, {}, LateRoundBehavior.BALANCED),
        ),
        adaptation=AdaptationPatterns({}, 50.0, 100.0, 50.0, ScarcityResponse({})),
    )


@pytest.fixture
def pool():
    return [player("wr1", "WR", 1), player("rb1", "RB", 2), player("qb1", "QB", 3), player("rb2", "RB", 4)]


class TestPredict:
    """Position scoring."""

    def test_baseline_decides(self, pool):
        predictor = PickPredictor({"m": make_model({"QB": {1: 0.6}, "RB": {1: 0.2}})})
        prediction = predictor.predict("m", [], pool, round_number=1, draft_slot=1)

        assert prediction.position == "QB"
        assert prediction.probabilities == {"WR": 0.01, "RB": 0.2, "QB": 0.6}
        assert prediction.confidence == pytest.approx(0.6 / 0.81)

    def test_unknown_member(self, pool):
        assert PickPredictor({}).predict("m", [], pool, 1, 1) is None

    def test_empty_pool(self):
        predictor = PickPredictor({"m": make_model({"QB": {1: 0.6}})})
        assert predictor.predict("m", [], [], 1, 1) is None

    def test_ties_go_to_first_position_on_board(self, pool):
        prediction = PickPredictor({"m": make_model({})}).predict("m", [], pool, 1, 1)
        assert prediction.position == "WR"

    def test_confidence_is_capped(self, pool):
        predictor = PickPredictor({"m": make_model({"QB": {1: 1.0}})})
        prediction = predictor.predict("m", [], [player("qb1", "QB", 1)], 1, 1)
        assert prediction.confidence == 0.95

    def test_board_state_node_can_flip_prediction(self, pool):
        panic = DecisionNode(
            conditions=(BoardStateCondition("RB", BoardState.RUN_ACTIVE), RosterNeedCondition(("RB",))),
            preferred_positions=("RB",),
            confidence=0.9,
        )
        predictor = PickPredictor({"m": make_model({"QB": {1: 0.6}, "RB": {1: 0.4}}, tree=[panic])})

        calm = predictor.predict("m", [], pool, 1, 1)
        run = predictor.predict("m", [], pool, 1, 1, BoardContext(position_runs=("RB",)))

        assert calm.position == "QB"
        assert run.position == "RB"
        assert run.probabilities["RB"] == pytest.approx(0.76)

    def test_node_ignored_when_need_is_met(self, pool):
        panic = DecisionNode(
            conditions=(BoardStateCondition("RB", BoardState.RUN_ACTIVE), RosterNeedCondition(("RB",))),
            preferred_positions=("RB",),
            confidence=0.9,
        )
        predictor = PickPredictor({"m": make_model({"QB": {1: 0.6}, "RB": {1: 0.4}}, tree=[panic])})

        prediction = predictor.predict("m", ["RB", "RB"], pool, 1, 1, BoardContext(position_runs=("RB",)))
        assert prediction.position == "QB"

    def test_slot_multiplier(self, pool):
        model = make_model({"QB": {1: 0.3}, "RB": {1: 0.2}}, draft_slot={SlotGroup.LATE: {"RB": 2.0}})
        predictor = PickPredictor({"m": model})

        assert predictor.predict("m", [], pool, 1, draft_slot=2).position == "QB"
        assert predictor.predict("m", [], pool, 1, draft_slot=10).position == "RB"

    def test_zero_multiplier_is_neutral(self, pool):
        model = make_model({"QB": {1: 0.6}}, draft_slot={SlotGroup.EARLY: {"QB": 0.0}})
        prediction = PickPredictor({"m": model}).predict("m", [], pool, 1, 1)
        assert prediction.probabilities["QB"] == 0.6

    def test_prediction_from_history(self, history, make_pool):
        profile = ProfileBuilder().build("alice", history)
        model = BehaviorModelBuilder(rng=random.Random(1)).build(profile, history)
        prediction = PickPredictor({"alice": model}).predict("alice", [], make_pool(40), 1, 1)

        assert prediction.position in {"RB", "WR"}
        assert 0.0 < prediction.confidence <= 0.95
        assert set(prediction.probabilities) == {"RB", "WR", "QB", "TE", "DEF"}


class TestConditions:
    def test_round_condition(self):
        board = BoardContext()
        assert condition_matches(RoundCondition(3, 6), 4, SlotGroup.MID, [], board)
        assert not condition_matches(RoundCondition(3, 6), 7, SlotGroup.MID, [], board)

    def test_slot_group_condition(self):
        assert condition_matches(SlotGroupCondition(SlotGroup.LATE), 1, SlotGroup.LATE, [], BoardContext())

    def test_unknown_condition(self):
        with pytest.raises(TypeError):
            condition_matches(object(), 1, SlotGroup.EARLY, [], BoardContext())

    def test_need_levels(self):
        assert need_level("QB", {}, ["QB"]) == NeedLevel.DESPERATE
        assert need_level("RB", {"RB": 1}, ["RB"]) == NeedLevel.NEED
        assert need_level("RB", {"RB": 3}, []) == NeedLevel.DEEP
        assert need_level("TE", {"TE": 1}, []) == NeedLevel.SATISFIED


class TestSelectPlayer:
    """Choosing a concrete player at the predicted position."""

    @pytest.fixture
    def running_backs(self):
        return [player(f"rb{i}", "RB", i) for i in range(1, 8)]

    def test_high_confidence_takes_best_adp(self, running_backs):
        predictor = PickPredictor({}, random.Random(0))
        chosen = predictor.select_player(running_backs, Prediction("RB", 0.9, {}))
        assert chosen.player_id == "rb1"

    def test_medium_confidence_stays_in_top_two(self, running_backs):
        predictor = PickPredictor({}, random.Random(0))
        chosen = {predictor.select_player(running_backs, Prediction("RB", 0.7, {})).player_id for _ in range(50)}
        assert chosen <= {"rb1", "rb2"}

    def test_low_confidence_stays_in_top_three(self, running_backs):
        predictor = PickPredictor({}, random.Random(0))
        chosen = {predictor.select_player(running_backs, Prediction("RB", 0.3, {})).player_id for _ in range(50)}
        assert chosen <= {"rb1", "rb2", "rb3"}

    def test_no_candidates(self, running_backs):
        assert PickPredictor({}).select_player(running_backs, Prediction("QB", 0.9, {})) is None

    def test_seeded_selection_is_reproducible(self, running_backs):
        picks = []
        for _ in range(2):
            predictor = PickPredictor({}, random.Random(42))
            picks.append([predictor.select_player(running_backs, Prediction("RB", 0.3, {})).player_id
                          for _ in range(10)])
        assert picks[0] == picks[1]
