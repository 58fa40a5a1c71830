"""
Historical draft record models.

A DraftRecord is one completed league draft for one season. Records are
loaded once from the historical JSON export (or the Sleeper API) and are
never modified afterwards, so all models here are frozen.
"""

from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .player import normalize_position


class Pick(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pick_number: int = Field(..., ge=1, validation_alias=AliasChoices("pick_number", "pickNumber"))
    round: int = Field(..., ge=1)
    slot_in_round: int = Field(0, ge=0, validation_alias=AliasChoices("slot_in_round", "draftSlot"))
    member_id: str = Field(..., validation_alias=AliasChoices("member_id", "pickedBy"))
    player_name: str = Field(..., validation_alias=AliasChoices("player_name", "playerName"))
    position: str
    nfl_team: str = Field("", validation_alias=AliasChoices("nfl_team", "nflTeam", "team"))

    @model_validator(mode="before")
    @classmethod
    def flatten_player(cls, data: Any) -> Any:
        """Accept the nested ``player``/``playerInfo`` object of the export format."""
        if not isinstance(data, dict):
            return data

        player = data.get("player") or data.get("playerInfo")
        if not isinstance(player, dict):
            return data

        flattened = {k: v for k, v in data.items() if k not in ("player", "playerInfo")}
        flattened.setdefault("player_name", player.get("name", ""))
        flattened.setdefault("position", player.get("position", ""))
        flattened.setdefault("nfl_team", player.get("team") or "")
        return flattened

    @field_validator("position")
    @classmethod
    def validate_position(cls, v):
        return normalize_position(v)

    @field_validator("member_id", mode="before")
    @classmethod
    def coerce_member_id(cls, v):
        return str(v)


class RecordSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    team_count: int = Field(..., ge=1, validation_alias=AliasChoices("team_count", "teams", "teamCount"))
    round_count: int = Field(..., ge=1, validation_alias=AliasChoices("round_count", "rounds", "roundCount"))
    draft_type: str = Field("snake", validation_alias=AliasChoices("draft_type", "draftType"))


class DraftRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    draft_id: str = Field(..., validation_alias=AliasChoices("draft_id", "draftId"))
    year: str
    league: str = ""
    draft_order: Dict[str, int] = Field(default_factory=dict,
                                        validation_alias=AliasChoices("draft_order", "draftOrder"))
    picks: List[Pick] = Field(default_factory=list)
    settings: RecordSettings

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, v):
        return str(v)

    @field_validator("picks")
    @classmethod
    def sort_picks(cls, v):
        return sorted(v, key=lambda p: p.pick_number)

    def picks_for(self, member_id: str) -> List[Pick]:
        return [pick for pick in self.picks if pick.member_id == member_id]

    def draft_slot_for(self, member_id: str) -> int:
        """Return the member's draft slot, or 0 when the order omits them."""
        return self.draft_order.get(member_id, 0)

    def picks_before(self, pick_number: int) -> List[Pick]:
        return [pick for pick in self.picks if pick.pick_number < pick_number]

    @property
    def member_ids(self) -> List[str]:
        seen = []
        for pick in self.picks:
            if pick.member_id not in seen:
                seen.append(pick.member_id)
        return seen
