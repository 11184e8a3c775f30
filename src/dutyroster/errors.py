"""Exceptions raised by the roster library."""

from typing import Optional


class RosterError(Exception):
    """Base class for roster generation failures."""


class NoEligibleStaffError(RosterError):
    """The staff directory returned no active staff for the school."""

    def __init__(self, school_id: str):
        self.school_id = school_id
        super().__init__("No active staff available")


class PersistenceError(RosterError):
    """The store rejected the bulk write of a generated roster."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class StorageError(Exception):
    """A store read or write failed."""
