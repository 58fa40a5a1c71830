"""
Utility functions for draft order calculations.

Snake draft math lives here so the simulator, autopilot and API share one
answer to "who picks now".
"""

from .snake_draft import pick_position, picking_slot

__all__ = [
    "pick_position",
    "picking_slot",
]
