"""
Tests for ADP file loading.
"""

import pytest

from draftsim.adp.loader import load_adp_csv
from draftsim.adp.reconciler import reconcile


class TestLoadADPCSV:
    """Reading ranking exports."""

    def test_loads_rows(self, adp_files):
        source_a, _ = adp_files
        entries = load_adp_csv(source_a)

        assert len(entries) == 7
        first = entries[0]
        assert first.name == "Christian McCaffrey"
        assert first.position == "RB"
        assert first.team == "SF"
        assert first.adp_value == 1.2

    def test_column_names_are_case_insensitive(self, adp_files):
        _, source_b = adp_files
        entries = load_adp_csv(source_b)
        assert len(entries) == 8
        assert entries[0].position == "RB1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_adp_csv(tmp_path / "missing.csv")

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("Player,Team\nJosh Allen,BUF\n")
        with pytest.raises(ValueError):
            load_adp_csv(path)

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "ranks.txt"
        path.write_text("Player,POS,Team,ADP\n")
        with pytest.raises(ValueError):
            load_adp_csv(path)

    def test_blank_names_are_skipped(self, tmp_path):
        path = tmp_path / "ranks.csv"
        path.write_text("Player,POS,Team,ADP\n,RB,SF,1.0\nJosh Allen,QB,BUF,20.0\n")
        assert [e.name for e in load_adp_csv(path)] == ["Josh Allen"]

    def test_blank_adp_is_unparseable(self, tmp_path):
        path = tmp_path / "ranks.csv"
        path.write_text("Player,POS,Team,ADP\nJosh Allen,QB,BUF,\n")
        assert load_adp_csv(path)[0].adp_value is None

    def test_loaded_sources_reconcile(self, adp_files):
        source_a, source_b = adp_files
        pool = reconcile(load_adp_csv(source_a), load_adp_csv(source_b))

        assert len(pool) == 11
        assert pool[0].name == "Christian McCaffrey"
        assert pool[0].average_adp == pytest.approx(1.1)
        assert [p.name for p in pool[1:3]] == ["CeeDee Lamb", "Tyreek Hill"]
        assert "K" not in {p.position for p in pool}
        assert pool[-1].position == "DEF"
        assert pool[-1].team == "SF"
