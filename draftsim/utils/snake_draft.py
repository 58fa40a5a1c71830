"""
Snake draft order calculation utilities.

Determines which draft slot is on the clock for any overall pick number.
Everything here is pure so the simulator, the autopilot and the API can all
ask "who picks now" without touching draft state.
"""

from typing import Tuple


def pick_position(pick_number: int, team_count: int) -> Tuple[int, int]:
    """
    Split an overall pick number into its round and position in the round.

    Args:
        pick_number: Overall pick number (1-based)
        team_count: Number of teams in draft

    Returns:
        Tuple of (round_number, pick_in_round), both 1-based
    """
    if pick_number < 1:
        raise ValueError("Pick number must be >= 1")
    if team_count < 1:
        raise ValueError("Team count must be >= 1")

    round_number = ((pick_number - 1) // team_count) + 1
    pick_in_round = ((pick_number - 1) % team_count) + 1
    return round_number, pick_in_round


def picking_slot(pick_number: int, team_count: int, is_snake_draft: bool = True) -> int:
    """
    Determine which draft slot picks at a given pick number.

    Snake drafts reverse direction each round:
    Round 1: 1, 2, 3, ... 12
    Round 2: 12, 11, 10, ... 1

    Returns:
        Draft slot (1-based)
    """
    round_number, pick_in_round = pick_position(pick_number, team_count)

    if not is_snake_draft or round_number % 2 == 1:
        return pick_in_round
    return team_count - pick_in_round + 1

