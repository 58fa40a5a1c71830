from .errors import DraftSimulationError, DraftConfigurationError, InvalidStateError, InvalidPickError
from .draft_simulator import DraftSimulator
from .pick_predictor import PickPredictor, Prediction
from .autopilot import AutoDrafter, fallback_player, realistic_position_needs

__all__ = [
    "DraftSimulationError",
    "DraftConfigurationError",
    "InvalidStateError",
    "InvalidPickError",
    "DraftSimulator",
    "PickPredictor",
    "Prediction",
    "AutoDrafter",
    "fallback_player",
    "realistic_position_needs",
]
