"""
Error types raised by the data layer.

Each domain error carries a ``status`` the request layer can hand straight to
its transport. Store failures are plain ``sqlite3.Error`` and are never wrapped.
"""

import sqlite3
from enum import Enum
from typing import Optional


StoreError = sqlite3.Error


class LunchbookError(Exception):
    status = 500


class NotFoundError(LunchbookError):
    status = 404


class ValidationError(LunchbookError):
    status = 400


class ErrorKind(Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    STORE = "store"


def error_kind(exc: Exception) -> Optional[ErrorKind]:
    """Classify an exception raised by the data layer."""
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(exc, StoreError):
        return ErrorKind.STORE
    return None
