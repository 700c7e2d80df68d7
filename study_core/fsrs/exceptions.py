class SchedulingError(ValueError):
    """Base exception for the scheduling core."""
    pass

class InvalidState(SchedulingError):
    """Raised when stored card fields violate a scheduling invariant."""
    pass

class InvalidConfiguration(SchedulingError):
    """Raised when scheduler parameters are malformed (detected at construction)."""
    pass

class InvalidInput(SchedulingError):
    """Raised when a per-call argument is malformed (rating, timestamp, elapsed time)."""
    pass
