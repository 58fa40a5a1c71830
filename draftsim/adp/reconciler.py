"""
ADP reconciliation.

Merges two independently sourced ADP rankings into a single ranked player
pool. Source A is the baseline; source B rows are matched onto it by
normalized name and position, falling back to a fuzzy same-position match.
Matched players get the mean of both ADP values, unmatched source B players
are added on their own, and the result is re-ranked 1..N by average ADP.

The fuzzy matcher compares characters position by position, so it is weaker
than a true edit distance: "Mike Williams" and "Mike Evans" can look alike
if their positions also line up. Matching behavior is kept stable on purpose
so ranks stay comparable across seasons.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..datamodels.player import PlayerPoolEntry, RawADPEntry, normalize_position

logger = logging.getLogger(__name__)

# Kickers are not drafted in the modeled leagues
EXCLUDED_POSITIONS = {"K"}

FUZZY_MATCH_THRESHOLD = 0.6

_SUFFIX_PATTERN = re.compile(r"\s+(jr|sr|ii|iii|iv)$")

TEAM_ABBREVIATIONS = {
    "Arizona Cardinals": "ARI",
    "Atlanta Falcons": "ATL",
    "Baltimore Ravens": "BAL",
    "Buffalo Bills": "BUF",
    "Carolina Panthers": "CAR",
    "Chicago Bears": "CHI",
    "Cincinnati Bengals": "CIN",
    "Cleveland Browns": "CLE",
    "Dallas Cowboys": "DAL",
    "Denver Broncos": "DEN",
    "Detroit Lions": "DET",
    "Green Bay Packers": "GB",
    "Houston Texans": "HOU",
    "Indianapolis Colts": "IND",
    "Jacksonville Jaguars": "JAC",
    "Kansas City Chiefs": "KC",
    "Las Vegas Raiders": "LV",
    "Los Angeles Chargers": "LAC",
    "Los Angeles Rams": "LAR",
    "Miami Dolphins": "MIA",
    "Minnesota Vikings": "MIN",
    "New England Patriots": "NE",
    "New Orleans Saints": "NO",
    "New York Giants": "NYG",
    "New York Jets": "NYJ",
    "Philadelphia Eagles": "PHI",
    "Pittsburgh Steelers": "PIT",
    "San Francisco 49ers": "SF",
    "Seattle Seahawks": "SEA",
    "Tampa Bay Buccaneers": "TB",
    "Tennessee Titans": "TEN",
    "Washington Commanders": "WAS",
}


def normalize_player_name(name: str) -> str:
    """
    Normalize a player name for matching.

    Lowercases, removes apostrophes, periods and other punctuation, collapses
    whitespace and drops generational suffixes (Jr, Sr, II, III, IV).
    """
    cleaned = re.sub(r"[^\w\s]", "", str(name).lower())
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return _SUFFIX_PATTERN.sub("", cleaned).strip()


def name_similarity(name1: str, name2: str) -> float:
    """
    Score two player names between 0.0 and 1.0.

    Identical normalized names score 1.0, containment scores 0.8 and
    anything else scores the fraction of aligned positions holding the same
    character, over the longer name's length.
    """
    norm1 = normalize_player_name(name1)
    norm2 = normalize_player_name(name2)

    if norm1 == norm2:
        return 1.0

    if norm1 in norm2 or norm2 in norm1:
        return 0.8

    max_len = max(len(norm1), len(norm2))
    if max_len == 0:
        return 1.0

    matches = sum(1 for a, b in zip(norm1, norm2) if a == b)
    return matches / max_len


def convert_team_abbreviation(team: Optional[str]) -> str:
    team = (team or "").strip()
    return TEAM_ABBREVIATIONS.get(team, team)


@dataclass
class _MergedPlayer:
    name: str
    position: str
    team: str
    average_adp: float
    source_a_adp: Optional[float] = None
    source_b_adp: Optional[float] = None


class ADPReconciler:
    """
    Reconciles two ADP sources into a ranked player pool.

    Args:
        excluded_positions: Positions dropped from both sources
        match_threshold: Minimum similarity for a fuzzy match to count
    """

    def __init__(self,
                 excluded_positions: Optional[Iterable[str]] = None,
                 match_threshold: float = FUZZY_MATCH_THRESHOLD):
        self.excluded_positions = set(EXCLUDED_POSITIONS if excluded_positions is None else excluded_positions)
        self.match_threshold = match_threshold

    def reconcile(self, source_a: List[RawADPEntry], source_b: List[RawADPEntry]) -> List[PlayerPoolEntry]:
        merged: Dict[str, _MergedPlayer] = {}
        dropped = 0

        for entry in source_a:
            adp = entry.adp_value
            position = normalize_position(entry.position)
            if adp is None or not str(entry.name).strip():
                dropped += 1
                continue
            if position in self.excluded_positions:
                continue

            merged[self._key(entry.name, position)] = _MergedPlayer(
                name=entry.name.strip(),
                position=position,
                team=convert_team_abbreviation(entry.team),
                average_adp=adp,
                source_a_adp=adp,
            )

        # Fuzzy candidates are the source A baseline only
        baseline = list(merged.items())
        matched = 0

        for entry in source_b:
            adp = entry.adp_value
            position = normalize_position(entry.position)
            if adp is None or not str(entry.name).strip():
                dropped += 1
                continue
            if position in self.excluded_positions:
                continue

            key = self._key(entry.name, position)
            existing = merged.get(key)
            if existing is None or existing.source_a_adp is None:
                match_key = self._find_best_match(entry.name, position, baseline)
                if match_key is not None:
                    existing = merged[match_key]

            if existing is not None and existing.source_a_adp is not None:
                existing.source_b_adp = adp
                existing.average_adp = (existing.source_a_adp + adp) / 2
                matched += 1
            elif key not in merged:
                merged[key] = _MergedPlayer(
                    name=entry.name.strip(),
                    position=position,
                    team=convert_team_abbreviation(entry.team),
                    average_adp=adp,
                    source_b_adp=adp,
                )

        if dropped:
            logger.debug(f"Dropped {dropped} malformed ADP rows")

        # sorted() is stable, so ties keep source order
        ranked = sorted(merged.values(), key=lambda p: p.average_adp)
        pool = [
            PlayerPoolEntry(
                player_id=f"adp_{rank}",
                name=player.name,
                position=player.position,
                team=player.team,
                adp_rank=rank,
                average_adp=player.average_adp,
                source_a_adp=player.source_a_adp,
                source_b_adp=player.source_b_adp,
            )
            for rank, player in enumerate(ranked, start=1)
        ]

        logger.info(f"Reconciled ADP pool: {len(pool)} players ({matched} matched across sources)")
        return pool

    def _key(self, name: str, position: str) -> str:
        return f"{normalize_player_name(name)}_{position}"

    def _find_best_match(self, name: str, position: str, baseline: List) -> Optional[str]:
        best_key = None
        best_similarity = 0.0

        for key, candidate in baseline:
            # Only match players of the same position
            if candidate.position != position:
                continue

            similarity = name_similarity(name, candidate.name)
            if similarity > best_similarity and similarity >= self.match_threshold:
                best_similarity = similarity
                best_key = key

        return best_key


def reconcile(source_a: List[RawADPEntry], source_b: List[RawADPEntry]) -> List[PlayerPoolEntry]:
    """Reconcile two ADP sources with the default settings."""
    return ADPReconciler().reconcile(source_a, source_b)
