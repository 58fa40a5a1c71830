"""Pytest configuration and shared fixtures."""
import json

import pytest

from draftsim.datamodels.draft_record import DraftRecord
from draftsim.datamodels.draft_state import DraftMember, DraftSettings
from draftsim.datamodels.player import PlayerPoolEntry
from draftsim.utils.snake_draft import pick_position, picking_slot

POOL_POSITIONS = ["RB", "WR", "QB", "TE", "WR", "RB", "DEF", "WR"]

# Two members, two historical seasons, six rounds each
ALICE_2023 = ["RB", "RB", "WR", "QB", "TE", "WR"]
ALICE_2024 = ["WR", "WR", "WR", "RB", "QB", "TE"]
BOB_2023 = ["QB", "RB", "RB", "WR", "WR", "TE"]
BOB_2024 = ["RB", "QB", "WR", "RB", "TE", "WR"]


def record_data(draft_id, year, rosters, order=None, league="premier"):
    """
    Build a draft record in the export format.

    Args:
        rosters: member id -> positions taken, one per round
        order: member ids in slot order (defaults to the rosters' order)
    """
    order = order or list(rosters)
    team_count = len(order)
    round_count = len(next(iter(rosters.values())))

    picks = []
    for pick_number in range(1, team_count * round_count + 1):
        round_number, _ = pick_position(pick_number, team_count)
        slot = picking_slot(pick_number, team_count)
        member_id = order[slot - 1]
        position = rosters[member_id][round_number - 1]
        picks.append({
            "pickNumber": pick_number,
            "round": round_number,
            "draftSlot": slot,
            "pickedBy": member_id,
            "player": {"name": f"{member_id} {position} {year}-{round_number}", "position": position, "team": "SF"},
        })

    return {
        "draftId": draft_id,
        "year": year,
        "league": league,
        "draftOrder": {member_id: slot for slot, member_id in enumerate(order, start=1)},
        "picks": picks,
        "settings": {"teams": team_count, "rounds": round_count, "draftType": "snake"},
    }


@pytest.fixture
def record_factory():
    """Factory building validated DraftRecords from per-round rosters."""
    def build(draft_id, year, rosters, order=None, league="premier"):
        return DraftRecord.model_validate(record_data(draft_id, year, rosters, order, league))
    return build


@pytest.fixture
def history(record_factory):
    """Two seasons of a two-team league."""
    return [
        record_factory("d2023", "2023", {"alice": ALICE_2023, "bob": BOB_2023}),
        record_factory("d2024", "2024", {"alice": ALICE_2024, "bob": BOB_2024}),
    ]


@pytest.fixture
def records_dir(tmp_path):
    directory = tmp_path / "records"
    directory.mkdir()
    for draft_id, year, rosters in [
        ("d2024", "2024", {"alice": ALICE_2024, "bob": BOB_2024}),
        ("d2023", "2023", {"alice": ALICE_2023, "bob": BOB_2023}),
    ]:
        (directory / f"{draft_id}.json").write_text(json.dumps(record_data(draft_id, year, rosters)))
    return directory


@pytest.fixture
def make_pool():
    """Factory for a ranked pool of ``count`` players cycling through common positions."""
    def build(count):
        return [
            PlayerPoolEntry(
                player_id=f"p{i}",
                name=f"Player {i}",
                position=POOL_POSITIONS[(i - 1) % len(POOL_POSITIONS)],
                team="KC",
                adp_rank=i,
                average_adp=float(i),
            )
            for i in range(1, count + 1)
        ]
    return build


@pytest.fixture
def make_members():
    def build(*member_ids):
        return [DraftMember(member_id=member_id, team_name=f"Team {member_id}") for member_id in member_ids]
    return build


@pytest.fixture
def two_team_settings():
    return DraftSettings(team_count=2, round_count=2)


@pytest.fixture
def adp_files(tmp_path):
    """Two overlapping ADP ranking sources (source A includes a kicker)."""
    source_a = tmp_path / "source_a.csv"
    source_a.write_text(
        "Player,POS,Team,ADP\n"
        "Christian McCaffrey,RB,SF,1.2\n"
        "CeeDee Lamb,WR,DAL,2.5\n"
        "Tyreek Hill,WR,MIA,3.0\n"
        "Bijan Robinson,RB,ATL,4.8\n"
        "Josh Allen,QB,BUF,20.4\n"
        "Travis Kelce,TE,KC,18.0\n"
        "Justin Tucker,K,BAL,120.0\n"
    )
    source_b = tmp_path / "source_b.csv"
    source_b.write_text(
        "player,pos,team,adp,bye\n"
        "Christian McCaffrey,RB1,San Francisco 49ers,1.0,9\n"
        "CeeDee Lamb,WR1,Dallas Cowboys,3.5,7\n"
        "Tyreek Hill,WR2,Miami Dolphins,3.0,6\n"
        "Jalen Hurts,QB2,Philadelphia Eagles,25.0,10\n"
        "Sam LaPorta,TE2,Detroit Lions,30.0,5\n"
        "Breece Hall,RB3,New York Jets,6.0,12\n"
        "Garrett Wilson,WR5,New York Jets,12.0,12\n"
        "San Francisco 49ers,DST,San Francisco 49ers,90.0,9\n"
    )
    return source_a, source_b
