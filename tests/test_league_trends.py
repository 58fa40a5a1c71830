"""
Tests for league-wide draft trends.
"""

import pytest

from draftsim.analysis.league_trends import draft_heat_map, identify_position_runs, round_distributions
from draftsim.datamodels.draft_record import Pick
from draftsim.utils.snake_draft import pick_position


def picks_for(positions, team_count=4):
    return [
        Pick(pick_number=n, round=pick_position(n, team_count)[0], member_id="m",
             player_name=f"Player {n}", position=position)
        for n, position in enumerate(positions, start=1)
    ]


class TestPositionRuns:
    def test_runs_of_three_or_more(self):
        runs = identify_position_runs(picks_for(["WR", "RB", "RB", "RB", "QB", "TE", "TE", "TE", "TE"]))

        assert [(r.position, r.start_pick, r.end_pick, r.pick_count) for r in runs] == [
            ("RB", 2, 4, 3),
            ("TE", 6, 9, 4),
        ]
        assert runs[1].round == 2

    def test_pairs_are_not_runs(self):
        assert identify_position_runs(picks_for(["RB", "RB", "WR", "WR"])) == []

    def test_empty(self):
        assert identify_position_runs([]) == []


class TestRoundDistributions:
    def test_percentages(self, history):
        distributions = round_distributions(history[0])

        assert len(distributions) == 6
        first = distributions[0]
        assert first.position_distribution == {"RB": 50.0, "QB": 50.0}
        assert first.most_popular_position == "RB"
        assert first.total_picks == 2
        for distribution in distributions:
            assert sum(distribution.position_distribution.values()) == pytest.approx(100.0)


class TestHeatMap:
    def test_frequency_across_seasons(self, history):
        cells = {(c.round, c.draft_slot, c.position): c.frequency for c in draft_heat_map(history)}

        assert cells[(1, 1, "RB")] == 0.5
        assert cells[(1, 1, "WR")] == 0.5
        assert cells[(1, 2, "QB")] == 0.5

    def test_no_records(self):
        assert draft_heat_map([]) == []
