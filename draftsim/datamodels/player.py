"""
Player data models and related enums.

A player enters the system twice: once as a raw ADP row from one of the
ranking sources, and once as a reconciled entry in the draft player pool.
Pool entries are immutable so they can be shared between simulators.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlayerPosition(str, Enum):
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    K = "K"
    DEF = "DEF"


# Positions tracked for timing/roster statistics, in reporting order
TRACKED_POSITIONS = ["QB", "RB", "WR", "TE", "K", "DEF"]
# Skill positions used for roster patterns and situational analysis
CORE_POSITIONS = ["QB", "RB", "WR", "TE"]

_POSITION_ALIASES = {
    "DST": "DEF",
    "D/ST": "DEF",
    "DEFENSE": "DEF",
    "PK": "K",
}


def normalize_position(position: Optional[str]) -> str:
    """
    Normalize a raw position label.

    Strips positional rank suffixes (``WR12`` -> ``WR``) and maps defense
    and kicker aliases onto the canonical codes.
    """
    if not position:
        return ""

    cleaned = re.sub(r"\d+$", "", str(position).strip().upper())
    return _POSITION_ALIASES.get(cleaned, cleaned)


@dataclass(frozen=True)
class RawADPEntry:
    """
    One row of a ranking source.

    ``adp`` is kept as received; non-numeric values are dropped during
    reconciliation rather than rejected here.
    """

    name: str
    position: str
    team: str
    adp: Union[float, str, None]

    @property
    def adp_value(self) -> Optional[float]:
        try:
            value = float(self.adp)
        except (TypeError, ValueError):
            return None

        if value != value:  # NaN
            return None
        return value


class PlayerPoolEntry(BaseModel):
    """A reconciled, ranked player available in a mock draft."""

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(..., description="Stable identifier within the pool")
    name: str = Field(..., description="Display name")
    position: str = Field(..., description="Canonical position code")
    team: str = Field("", description="NFL team abbreviation")
    adp_rank: int = Field(..., ge=1, description="Dense 1..N rank")
    average_adp: float = Field(..., description="Mean ADP across contributing sources")
    source_a_adp: Optional[float] = Field(None, description="ADP from the primary source")
    source_b_adp: Optional[float] = Field(None, description="ADP from the secondary source")

    @field_validator("position")
    @classmethod
    def validate_position(cls, v):
        return normalize_position(v)

    @field_validator("team")
    @classmethod
    def validate_team_abbreviation(cls, v):
        return (v or "").upper()

    def __str__(self) -> str:
        return f"{self.name} ({self.position}, {self.team})"

    @property
    def is_skill_position(self) -> bool:
        return self.position in CORE_POSITIONS
