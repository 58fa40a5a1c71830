class DraftSimulationError(Exception):
    """Base class for mock draft errors."""


class DraftConfigurationError(DraftSimulationError):
    """Settings, draft order or player pool rejected at initialization."""


class InvalidStateError(DraftSimulationError):
    """Operation not allowed in the draft's current state."""


class InvalidPickError(DraftSimulationError):
    """Requested player cannot be picked."""
