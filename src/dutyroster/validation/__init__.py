"""Validation module for verifying roster correctness."""

from dutyroster.validation.validator import RosterValidator, ValidationError

__all__ = [
    "RosterValidator",
    "ValidationError",
]
