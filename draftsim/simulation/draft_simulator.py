"""
Mock draft state machine.

A DraftSimulator owns exactly one DraftState and is the only thing allowed
to change it. The state moves Initializing -> InProgress -> Complete and
never leaves Complete. Every mutating call validates first and mutates
second, so a rejected call leaves the state exactly as it was.

Independent simulations need independent simulators; nothing here is safe
to share between concurrent callers.
"""

import io
import logging
import uuid
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..datamodels.draft_state import (
    DraftMember, DraftSettings, DraftState, DraftStatus, DraftType, MockDraftPick,
)
from ..datamodels.player import PlayerPoolEntry
from ..utils.snake_draft import pick_position, picking_slot
from .errors import DraftConfigurationError, InvalidPickError, InvalidStateError

logger = logging.getLogger(__name__)


class DraftSimulator:
    def __init__(self):
        self._state: Optional[DraftState] = None

    @classmethod
    def create(cls,
               members: Sequence[DraftMember],
               player_pool: Sequence[PlayerPoolEntry],
               settings: DraftSettings,
               draft_order: Optional[Sequence[str]] = None,
               draft_id: Optional[str] = None) -> "DraftSimulator":
        simulator = cls()
        simulator.initialize(members, player_pool, settings, draft_order, draft_id)
        return simulator

    @property
    def state(self) -> DraftState:
        if self._state is None:
            raise InvalidStateError("Draft has not been initialized")
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def is_complete(self) -> bool:
        return self.state.is_complete

    def initialize(self,
                   members: Sequence[DraftMember],
                   player_pool: Sequence[PlayerPoolEntry],
                   settings: DraftSettings,
                   draft_order: Optional[Sequence[str]] = None,
                   draft_id: Optional[str] = None) -> DraftState:
        """
        Set up a new draft.

        Args:
            members: Draft participants; their list order is the default draft order
            player_pool: Players available at the start of the draft
            settings: Team count, round count and draft type
            draft_order: Optional member ids in slot order, overriding the list order
            draft_id: Optional identifier, generated when omitted

        Returns:
            The freshly created DraftState (status IN_PROGRESS)

        Raises:
            InvalidStateError: if this simulator already holds a draft
            DraftConfigurationError: if members, order or pool are inconsistent
        """
        if self._state is not None:
            raise InvalidStateError("Draft already initialized")

        if len(members) != settings.team_count:
            raise DraftConfigurationError(
                f"Expected {settings.team_count} members, got {len(members)}")

        member_ids = [m.member_id for m in members]
        if len(set(member_ids)) != len(member_ids):
            raise DraftConfigurationError("Duplicate member ids")

        if draft_order is not None:
            if sorted(draft_order) != sorted(member_ids):
                raise DraftConfigurationError("Draft order must list every member exactly once")
            ordered_ids = list(draft_order)
        else:
            ordered_ids = member_ids

        player_ids = [p.player_id for p in player_pool]
        if len(set(player_ids)) != len(player_ids):
            raise DraftConfigurationError("Duplicate player ids in player pool")

        by_id = {m.member_id: m for m in members}
        slotted = [
            by_id[member_id].model_copy(update={"draft_slot": slot})
            for slot, member_id in enumerate(ordered_ids, start=1)
        ]

        state = DraftState(
            draft_id=draft_id or f"mock_{uuid.uuid4().hex[:12]}",
            members=slotted,
            settings=settings,
            current_pick=1,
            player_pool=sorted(player_pool, key=lambda p: p.adp_rank),
        )
        state.status = DraftStatus.IN_PROGRESS
        self._state = state

        logger.info(f"Initialized mock draft {state.draft_id}: {settings.team_count} teams, "
                    f"{settings.round_count} rounds, {len(state.player_pool)} players")
        return state

    def picking_slot(self, pick_number: int) -> int:
        settings = self.state.settings
        return picking_slot(pick_number, settings.team_count, settings.draft_type == DraftType.SNAKE)

    def picking_member(self, pick_number: Optional[int] = None) -> DraftMember:
        """Member on the clock at ``pick_number`` (default: the current pick)."""
        state = self.state
        if pick_number is None:
            pick_number = state.current_pick
        if not 1 <= pick_number <= state.total_picks:
            raise InvalidStateError(f"Pick {pick_number} outside 1..{state.total_picks}")

        member = state.member_for_slot(self.picking_slot(pick_number))
        if member is None:
            raise InvalidStateError(f"No member holds slot {self.picking_slot(pick_number)}")
        return member

    def find_player(self, player_id: str) -> Optional[PlayerPoolEntry]:
        for player in self.state.player_pool:
            if player.player_id == player_id:
                return player
        return None

    def apply_pick(self, player_id: str, is_auto: bool = False) -> MockDraftPick:
        """
        Record the current pick and advance the draft.

        Raises:
            InvalidStateError: if the draft is complete
            InvalidPickError: if the player is not in the pool
        """
        state = self.state
        if state.is_complete:
            raise InvalidStateError(f"Draft {state.draft_id} is complete")

        player = self.find_player(player_id)
        if player is None:
            raise InvalidPickError(f"Player {player_id} is not available")

        member = self.picking_member(state.current_pick)
        round_number, pick_in_round = pick_position(state.current_pick, state.settings.team_count)

        pick = MockDraftPick(
            pick_number=state.current_pick,
            round=round_number,
            pick_in_round=pick_in_round,
            member_id=member.member_id,
            player=player,
            is_auto=is_auto,
        )

        state.picks[state.current_pick - 1] = pick
        state.player_pool = [p for p in state.player_pool if p.player_id != player_id]
        state.current_pick += 1
        state.updated_at = pick.timestamp

        logger.debug(f"Pick {pick.pick_number} ({round_number}.{pick_in_round}): "
                     f"{member.member_id} takes {player}{' [auto]' if is_auto else ''}")

        if state.current_pick > state.total_picks:
            state.status = DraftStatus.COMPLETED
            logger.info(f"Mock draft {state.draft_id} complete after {state.total_picks} picks")

        return pick

    # ------------------------------------------------------------------
    # Read-only projections
    # ------------------------------------------------------------------

    def roster_for(self, member_id: str) -> List[MockDraftPick]:
        return [p for p in self.state.completed_picks if p.member_id == member_id]

    def results_by_member(self) -> Dict[str, List[MockDraftPick]]:
        return {m.member_id: self.roster_for(m.member_id) for m in self.state.members}

    def recent_positions(self, count: int = 6) -> List[str]:
        picks = self.state.completed_picks
        return [p.position for p in picks[-count:]] if count > 0 else []

    def snapshot(self) -> DraftState:
        """Deep copy of the current state, safe to hand to callers."""
        return self.state.model_copy(deep=True)

    def export_grid(self) -> List[List[str]]:
        """
        Round x team grid of completed picks.

        The first row is the header (``Round`` then team names in slot
        order). Cells read ``"{player} ({position})"`` or are empty.
        """
        state = self.state
        members = sorted(state.members, key=lambda m: m.draft_slot)
        column = {m.member_id: i for i, m in enumerate(members)}

        grid = [["Round"] + [m.display_name for m in members]]
        for round_number in range(1, state.settings.round_count + 1):
            grid.append([str(round_number)] + [""] * len(members))

        for pick in state.completed_picks:
            grid[pick.round][column[pick.member_id] + 1] = f"{pick.player.name} ({pick.player.position})"

        return grid

    def export_dataframe(self) -> pd.DataFrame:
        grid = self.export_grid()
        return pd.DataFrame(grid[1:], columns=grid[0])

    def export_csv(self) -> str:
        buffer = io.StringIO()
        self.export_dataframe().to_csv(buffer, index=False)
        return buffer.getvalue()
