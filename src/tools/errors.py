"""
Domain errors raised by the connection registry and the call table.

The signaling router catches these and decides whether the sender gets a
message back or the event is dropped.
"""


class SignalingError(Exception):
    """Base class for relay domain errors."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class IdentityTakenError(SignalingError):
    """Raised when an identity is already bound to another live connection."""


class HandleAlreadyBoundError(SignalingError):
    """Raised when a connection tries to log in under a second identity."""


class SelfCallError(SignalingError):
    """Raised when caller and callee are the same identity."""


class CallNotFoundError(SignalingError):
    """Raised when no record exists for a call id."""


class CallUnauthorizedError(SignalingError):
    """Raised when the actor is not a party or the transition is not allowed."""
