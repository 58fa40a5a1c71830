"""
Data models for the draft behavior engine.

This module exports the core data structures used throughout the package.
Keeping exports centralized here allows for easy imports and future refactoring.
"""

from .player import PlayerPosition, PlayerPoolEntry, RawADPEntry, normalize_position
from .draft_record import DraftRecord, Pick, RecordSettings
from .draft_state import (
    DraftMember, DraftSettings, DraftState, DraftStateResponse, DraftStatus, DraftType, MockDraftPick,
)
from .profile import MemberProfile, DraftStrategyLabel, PositionTiming
from .behavior import (
    BehaviorModel, BoardContext, BoardState, BoardStateCondition, DecisionNode, NeedLevel,
    RosterContext, RosterNeedCondition, RoundCondition, SlotGroup, SlotGroupCondition,
)

__all__ = [
    "PlayerPosition",
    "PlayerPoolEntry",
    "RawADPEntry",
    "normalize_position",
    "DraftRecord",
    "Pick",
    "RecordSettings",
    "DraftMember",
    "DraftSettings",
    "DraftState",
    "DraftStateResponse",
    "DraftStatus",
    "DraftType",
    "MockDraftPick",
    "MemberProfile",
    "DraftStrategyLabel",
    "PositionTiming",

    "BehaviorModel",
    "BoardContext",
    "BoardState",
    "BoardStateCondition",
    "DecisionNode",
    "NeedLevel",
    "RosterContext",
    "RosterNeedCondition",
    "RoundCondition",
    "SlotGroup",
    "SlotGroupCondition",
]
