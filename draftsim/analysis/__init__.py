"""
Historical draft analysis: member profiles, behavior models and league trends.
"""

from .profile_builder import ProfileBuilder, compare_profiles
from .behavior_model import BehaviorModelBuilder
from .profile_cache import ProfileCache
from .pick_context import AdpValueScorer, RandomValueScorer, live_board_context
from .league_trends import identify_position_runs, round_distributions, draft_heat_map

__all__ = [
    "ProfileBuilder",
    "compare_profiles",
    "BehaviorModelBuilder",
    "ProfileCache",
    "AdpValueScorer",
    "RandomValueScorer",
    "live_board_context",
    "identify_position_runs",
    "round_distributions",
    "draft_heat_map",
]
