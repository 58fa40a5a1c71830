"""
Tests for the mock draft state machine.
"""

import pytest
from pydantic import ValidationError

from draftsim.datamodels.draft_state import DraftMember, DraftSettings, DraftStatus, DraftType
from draftsim.datamodels.player import PlayerPoolEntry
from draftsim.simulation.draft_simulator import DraftSimulator
from draftsim.simulation.errors import (
    DraftConfigurationError, DraftSimulationError, InvalidPickError, InvalidStateError,
)


@pytest.fixture
def four_players():
    return [
        PlayerPoolEntry(player_id=f"P{i}", name=f"P{i}", position=position, adp_rank=i, average_adp=float(i))
        for i, position in enumerate(["RB", "WR", "QB", "TE"], start=1)
    ]


@pytest.fixture
def two_team_draft(four_players, two_team_settings):
    members = [DraftMember(member_id="A"), DraftMember(member_id="B")]
    return DraftSimulator.create(members, four_players, two_team_settings, draft_id="mock_test")


class TestInitialize:
    """Draft setup and validation."""

    def test_initial_state(self, two_team_draft):
        state = two_team_draft.state

        assert state.draft_id == "mock_test"
        assert state.status == DraftStatus.IN_PROGRESS
        assert state.current_pick == 1
        assert state.picks == [None] * 4
        assert [m.draft_slot for m in state.members] == [1, 2]
        assert [p.player_id for p in state.player_pool] == ["P1", "P2", "P3", "P4"]

    def test_state_before_initialize(self):
        with pytest.raises(InvalidStateError):
            DraftSimulator().state

    def test_initialize_twice(self, two_team_draft, make_members, four_players, two_team_settings):
        with pytest.raises(InvalidStateError):
            two_team_draft.initialize(make_members("A", "B"), four_players, two_team_settings)

    def test_member_count_must_match(self, make_members, four_players, two_team_settings):
        with pytest.raises(DraftConfigurationError):
            DraftSimulator.create(make_members("A", "B", "C"), four_players, two_team_settings)

    def test_duplicate_members(self, make_members, four_players, two_team_settings):
        with pytest.raises(DraftConfigurationError):
            DraftSimulator.create(make_members("A", "A"), four_players, two_team_settings)

    def test_draft_order_must_cover_members(self, make_members, four_players, two_team_settings):
        with pytest.raises(DraftConfigurationError):
            DraftSimulator.create(make_members("A", "B"), four_players, two_team_settings, draft_order=["A", "C"])

    def test_duplicate_players(self, make_members, four_players, two_team_settings):
        with pytest.raises(DraftConfigurationError):
            DraftSimulator.create(make_members("A", "B"), four_players + four_players[:1], two_team_settings)

    def test_draft_order_assigns_slots(self, make_members, four_players, two_team_settings):
        simulator = DraftSimulator.create(make_members("A", "B"), four_players, two_team_settings,
                                          draft_order=["B", "A"])
        assert simulator.picking_member().member_id == "B"
        assert simulator.state.member("A").draft_slot == 2

    def test_pool_is_sorted_by_rank(self, make_members, four_players, two_team_settings):
        simulator = DraftSimulator.create(make_members("A", "B"), list(reversed(four_players)), two_team_settings)
        assert [p.adp_rank for p in simulator.state.player_pool] == [1, 2, 3, 4]

    def test_configuration_errors_share_base(self):
        assert issubclass(DraftConfigurationError, DraftSimulationError)
        assert issubclass(InvalidPickError, DraftSimulationError)
        assert issubclass(InvalidStateError, DraftSimulationError)

    @pytest.mark.parametrize("team_count,round_count", [(0, 15), (33, 15), (12, 0), (12, 41)])
    def test_settings_bounds(self, team_count, round_count):
        with pytest.raises(ValidationError):
            DraftSettings(team_count=team_count, round_count=round_count)


class TestApplyPick:
    """Recording picks."""

    def test_two_team_snake(self, two_team_draft):
        made = [two_team_draft.apply_pick(player_id) for player_id in ["P1", "P2", "P3", "P4"]]

        assert [p.member_id for p in made] == ["A", "B", "B", "A"]
        assert [(p.round, p.pick_in_round) for p in made] == [(1, 1), (1, 2), (2, 1), (2, 2)]
        assert [pick.player.player_id for pick in two_team_draft.roster_for("A")] == ["P1", "P4"]
        assert two_team_draft.is_complete
        assert two_team_draft.state.current_pick == 5
        assert two_team_draft.state.player_pool == []

    def test_pick_after_completion(self, two_team_draft):
        for player_id in ["P1", "P2", "P3", "P4"]:
            two_team_draft.apply_pick(player_id)

        with pytest.raises(InvalidStateError):
            two_team_draft.apply_pick("P1")

    def test_unknown_player_leaves_state_unchanged(self, two_team_draft):
        with pytest.raises(InvalidPickError):
            two_team_draft.apply_pick("nobody")

        state = two_team_draft.state
        assert state.current_pick == 1
        assert len(state.player_pool) == 4
        assert state.completed_picks == []

    def test_player_cannot_be_drafted_twice(self, two_team_draft):
        two_team_draft.apply_pick("P1")
        with pytest.raises(InvalidPickError):
            two_team_draft.apply_pick("P1")

    def test_auto_flag(self, two_team_draft):
        assert two_team_draft.apply_pick("P1", is_auto=True).is_auto
        assert not two_team_draft.apply_pick("P2").is_auto

    def test_linear_order(self, make_members, four_players):
        settings = DraftSettings(team_count=2, round_count=2, draft_type=DraftType.LINEAR)
        simulator = DraftSimulator.create(make_members("A", "B"), four_players, settings)
        made = [simulator.apply_pick(player_id) for player_id in ["P1", "P2", "P3", "P4"]]
        assert [p.member_id for p in made] == ["A", "B", "A", "B"]

    def test_full_twelve_team_draft(self, make_members, make_pool):
        members = make_members(*[f"m{i}" for i in range(1, 13)])
        pool = make_pool(200)
        simulator = DraftSimulator.create(members, pool, DraftSettings(team_count=12, round_count=15))

        for _ in range(180):
            simulator.apply_pick(simulator.state.player_pool[0].player_id)

        state = simulator.state
        assert state.status == DraftStatus.COMPLETED
        assert state.current_pick == 181
        assert all(pick is not None for pick in state.picks)
        assert len(state.player_pool) == 20
        assert state.complete_percentage == 100.0

        drafted = {pick.player.player_id for pick in state.picks}
        remaining = {p.player_id for p in state.player_pool}
        assert drafted.isdisjoint(remaining)
        assert drafted | remaining == {p.player_id for p in pool}
        assert all(len(roster) == 15 for roster in simulator.results_by_member().values())


class TestProjections:
    """Read-only views of the draft."""

    def test_picking_member_out_of_range(self, two_team_draft):
        with pytest.raises(InvalidStateError):
            two_team_draft.picking_member(5)

    def test_recent_positions(self, two_team_draft):
        two_team_draft.apply_pick("P1")
        two_team_draft.apply_pick("P3")
        assert two_team_draft.recent_positions() == ["RB", "QB"]
        assert two_team_draft.recent_positions(1) == ["QB"]

    def test_snapshot_is_independent(self, two_team_draft):
        snapshot = two_team_draft.snapshot()
        snapshot.player_pool.clear()
        snapshot.current_pick = 3

        assert len(two_team_draft.state.player_pool) == 4
        assert two_team_draft.state.current_pick == 1

    def test_export_grid(self, two_team_draft):
        for player_id in ["P1", "P2", "P3"]:
            two_team_draft.apply_pick(player_id)

        assert two_team_draft.export_grid() == [
            ["Round", "A", "B"],
            ["1", "P1 (RB)", "P2 (WR)"],
            ["2", "", "P3 (QB)"],
        ]

    def test_export_uses_team_names(self, make_members, four_players, two_team_settings):
        simulator = DraftSimulator.create(make_members("A", "B"), four_players, two_team_settings,
                                          draft_order=["B", "A"])
        assert simulator.export_grid()[0] == ["Round", "Team B", "Team A"]

    def test_export_csv(self, two_team_draft):
        two_team_draft.apply_pick("P1")
        lines = two_team_draft.export_csv().splitlines()
        assert lines[0] == "Round,A,B"
        assert lines[1] == "1,P1 (RB),"
