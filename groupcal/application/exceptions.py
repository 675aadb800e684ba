
class EditValidationError(ValueError):
    """Raised when an edit session cannot be saved (missing or contradictory input)."""
    pass


class NoEditSessionError(LookupError):
    """Raised when a participant interacts with an editor they never opened."""
    pass


class TransportFailure(RuntimeError):
    """Raised when the chat transport fails to fetch history or deliver a view."""
    pass
