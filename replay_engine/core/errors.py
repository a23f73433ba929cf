"""
Exception types for the replay engine.

Out-of-range positions, play-at-end and repeated cancels are recovered locally
and never raise; these cover the remaining misuse.
"""


class ReplayError(Exception):
    """Base class for replay engine errors."""
    pass


class SessionDisposedError(ReplayError):
    """Raised when a control operation reaches a disposed session."""
    pass


class SessionNotFoundError(ReplayError):
    """Raised when a session id is not registered with the service."""
    pass


class SessionLimitError(ReplayError):
    """Raised when the session registry is full after expiry cleanup."""
    pass


class RecordFormatError(ReplayError, ValueError):
    """Raised when a game record or exported session cannot be parsed."""
    pass
