"""
Custom exceptions.

The rule engine itself never raises for illegal actions (it returns the state unchanged).
These are only used at the boundaries: request validation, board parsing, and looking up games.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong in this application."""


class InvalidFENError(GameError):
    """Board string could not be parsed."""


class InvalidRequestError(GameError, ValueError):
    """Request data is malformed.

    NOTE: also a ValueError, so pydantic validators can raise it and have it wrapped into a ValidationError.
    """


class RepositoryError(GameError):
    """Requested record does not exist (or could not be stored)."""
