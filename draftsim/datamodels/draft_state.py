"""
Mock draft state models.

Represents the live state of a mock draft: who is in it, which pick is on
the clock, the picks made so far and the players still available. The
state is owned by a single DraftSimulator and only changes through
DraftSimulator.apply_pick.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .player import PlayerPoolEntry


class DraftType(str, Enum):
    SNAKE = "snake"
    LINEAR = "linear"


class DraftStatus(str, Enum):
    INITIALIZING = "initializing"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class DraftSettings(BaseModel):
    """Validated once at initialization and immutable afterwards."""

    model_config = ConfigDict(frozen=True)

    team_count: int = Field(..., ge=1, le=32, description="Number of teams in the draft")
    round_count: int = Field(..., ge=1, le=40, description="Number of rounds")
    draft_type: DraftType = Field(DraftType.SNAKE, description="Snake or linear pick order")

    @property
    def total_picks(self) -> int:
        return self.team_count * self.round_count


class DraftMember(BaseModel):
    member_id: str = Field(..., min_length=1)
    team_name: str = Field("", description="Display name used as the export column header")
    draft_slot: int = Field(0, ge=0, description="1-based slot, assigned at initialization")
    is_user: bool = Field(False, description="Picks for this member are made manually")

    @field_validator("team_name")
    @classmethod
    def default_team_name(cls, v):
        return v.strip()

    @property
    def display_name(self) -> str:
        return self.team_name or self.member_id


class MockDraftPick(BaseModel):
    model_config = ConfigDict(frozen=True)

    pick_number: int = Field(..., ge=1)
    round: int = Field(..., ge=1)
    pick_in_round: int = Field(..., ge=1)
    member_id: str
    player: PlayerPoolEntry
    is_auto: bool = False
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def position(self) -> str:
        return self.player.position


class DraftState(BaseModel):
    draft_id: str
    members: List[DraftMember]
    settings: DraftSettings
    current_pick: int = Field(1, ge=1)
    picks: List[Optional[MockDraftPick]] = Field(default_factory=list)
    player_pool: List[PlayerPoolEntry] = Field(default_factory=list)
    status: DraftStatus = DraftStatus.INITIALIZING

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def allocate_pick_slots(self):
        if not self.picks:
            self.picks = [None] * self.settings.total_picks
        return self

    @property
    def is_complete(self) -> bool:
        return self.status == DraftStatus.COMPLETED

    @property
    def total_picks(self) -> int:
        return self.settings.total_picks

    @property
    def current_round(self) -> int:
        return (self.current_pick - 1) // self.settings.team_count + 1

    @property
    def completed_picks(self) -> List[MockDraftPick]:
        return [pick for pick in self.picks if pick is not None]

    @property
    def complete_percentage(self) -> float:
        return min(100.0, (len(self.completed_picks) / self.total_picks) * 100)

    def member(self, member_id: str) -> Optional[DraftMember]:
        for member in self.members:
            if member.member_id == member_id:
                return member
        return None

    def member_for_slot(self, draft_slot: int) -> Optional[DraftMember]:
        for member in self.members:
            if member.draft_slot == draft_slot:
                return member
        return None

    def position_counts(self, member_id: str) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for pick in self.completed_picks:
            if pick.member_id == member_id:
                counts[pick.position] = counts.get(pick.position, 0) + 1
        return counts


class DraftStateResponse(BaseModel):
    """API view of a draft; the remaining pool is summarized, not listed."""

    draft_id: str
    status: DraftStatus
    settings: DraftSettings
    current_pick: int
    members: List[DraftMember]
    picks: List[MockDraftPick]
    available_players_count: int
    on_the_clock: Optional[str] = None

    @classmethod
    def from_state(cls, state: DraftState, on_the_clock: Optional[str] = None) -> "DraftStateResponse":
        return cls(
            draft_id=state.draft_id,
            status=state.status,
            settings=state.settings,
            current_pick=state.current_pick,
            members=state.members,
            picks=state.completed_picks,
            available_players_count=len(state.player_pool),
            on_the_clock=on_the_clock,
        )
