"""
Token factory error kinds.
"""

from enum import Enum


class TokenFactoryError(Enum):
    """Failures reported by the token factory module."""
    ALREADY_EXISTS = "token exists"
    NOT_FOUND = "token does not exist"
    UNAUTHORIZED = "sender is not token admin"
    INVALID_MESSAGE = "invalid token message"


class InvalidMessage(Exception):
    """A recognized token message with malformed fields."""
    pass
