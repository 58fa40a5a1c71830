"""
Tests for ADP reconciliation.
"""

import pytest

from draftsim.adp.reconciler import (
    ADPReconciler, convert_team_abbreviation, name_similarity, normalize_player_name, reconcile,
)
from draftsim.datamodels.player import RawADPEntry


def entry(name, position, adp, team="SF"):
    return RawADPEntry(name=name, position=position, team=team, adp=adp)


class TestNameNormalization:
    """Name cleanup used for matching."""

    @pytest.mark.parametrize("raw,expected", [
        ("Odell Beckham Jr.", "odell beckham"),
        ("Ja'Marr Chase", "jamarr chase"),
        ("D.J. Moore", "dj moore"),
        ("Kenneth Walker III", "kenneth walker"),
        ("  Josh   Allen ", "josh allen"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_player_name(raw) == expected

    def test_identical_after_normalization(self):
        assert name_similarity("Marvin Harrison Jr.", "Marvin Harrison") == 1.0

    def test_containment_scores_point_eight(self):
        assert name_similarity("Hollywood Brown", "Marquise Hollywood Brown") == 0.8

    def test_unrelated_names_score_low(self):
        assert name_similarity("Jalen Hurts", "Josh Allen") < 0.6

    def test_team_conversion(self):
        assert convert_team_abbreviation("Buffalo Bills") == "BUF"
        assert convert_team_abbreviation("KC") == "KC"
        assert convert_team_abbreviation(None) == ""


class TestReconcile:
    """Merging two sources into a ranked pool."""

    def test_exact_match_averages_adp(self):
        pool = reconcile([entry("Player X", "RB", 1.0)], [entry("Player X", "RB", 3.0)])

        assert len(pool) == 1
        player = pool[0]
        assert player.average_adp == 2.0
        assert player.adp_rank == 1
        assert player.source_a_adp == 1.0
        assert player.source_b_adp == 3.0

    def test_source_b_only_player_is_added(self):
        pool = reconcile([entry("Player X", "RB", 1.0)], [entry("Player Y", "WR", 5.0)])

        by_name = {p.name: p for p in pool}
        assert set(by_name) == {"Player X", "Player Y"}
        assert by_name["Player Y"].source_a_adp is None
        assert by_name["Player Y"].average_adp == 5.0

    def test_ranks_are_dense_and_ordered(self):
        pool = reconcile(
            [entry("A", "RB", 9.0), entry("B", "WR", 2.0), entry("C", "QB", 5.0)],
            [],
        )

        assert [p.name for p in pool] == ["B", "C", "A"]
        assert [p.adp_rank for p in pool] == [1, 2, 3]
        assert [p.player_id for p in pool] == ["adp_1", "adp_2", "adp_3"]

    def test_ties_keep_source_order(self):
        pool = reconcile([entry("First", "RB", 5.0), entry("Second", "WR", 5.0)], [])
        assert [p.name for p in pool] == ["First", "Second"]

    def test_kickers_are_excluded(self):
        pool = reconcile([entry("Justin Tucker", "K", 120.0)], [entry("Harrison Butker", "PK", 130.0)])
        assert pool == []

    def test_custom_exclusions(self):
        reconciler = ADPReconciler(excluded_positions=set())
        pool = reconciler.reconcile([entry("Justin Tucker", "K", 120.0)], [])
        assert [p.position for p in pool] == ["K"]

    def test_malformed_rows_are_dropped(self):
        pool = reconcile(
            [entry("Good Player", "RB", 1.0), entry("Bad Player", "WR", "N/A"), entry("", "QB", 3.0)],
            [entry("Other Bad", "TE", None)],
        )
        assert [p.name for p in pool] == ["Good Player"]

    def test_suffix_and_punctuation_match_exactly(self):
        pool = reconcile([entry("Odell Beckham Jr.", "WR", 40.0)], [entry("Odell Beckham", "WR", 50.0)])

        assert len(pool) == 1
        assert pool[0].average_adp == 45.0

    def test_fuzzy_match_within_position(self):
        pool = reconcile(
            [entry("Marquise Hollywood Brown", "WR", 60.0)],
            [entry("Hollywood Brown", "WR", 70.0)],
        )

        assert len(pool) == 1
        assert pool[0].name == "Marquise Hollywood Brown"
        assert pool[0].source_b_adp == 70.0

    def test_fuzzy_match_ignores_other_positions(self):
        pool = reconcile(
            [entry("Marquise Hollywood Brown", "WR", 60.0)],
            [entry("Hollywood Brown", "RB", 70.0)],
        )
        assert len(pool) == 2

    def test_positions_and_teams_are_normalized(self):
        pool = reconcile([entry("Josh Allen", "QB1", 20.0, team="Buffalo Bills")], [])
        assert pool[0].position == "QB"
        assert pool[0].team == "BUF"

    def test_reconcile_is_deterministic(self):
        source_a = [entry("A", "RB", 3.0), entry("B", "WR", 1.0)]
        source_b = [entry("A", "RB", 5.0), entry("C", "TE", 2.0)]
        assert reconcile(source_a, source_b) == reconcile(source_a, source_b)

    def test_same_source_twice_keeps_values(self):
        source = [entry("A", "RB", 3.0), entry("B", "WR", 1.0)]
        pool = reconcile(source, source)

        assert [(p.name, p.average_adp) for p in pool] == [("B", 1.0), ("A", 3.0)]
        assert all(p.source_b_adp == p.source_a_adp for p in pool)
