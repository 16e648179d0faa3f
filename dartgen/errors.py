"""Exceptions raised by the generator."""

from __future__ import annotations


class DartGenError(Exception):
    """Base exception for dartgen errors."""

    pass


class ContractViolation(DartGenError):
    """An internal precondition was violated.

    Raised when a component is asked for something that the scanner never
    established, e.g. the replacement text of a class whose end line was not
    found. These are programming errors, not problems with the user's source.
    """

    pass


class ConfigError(DartGenError):
    """Exception raised when the configuration is invalid."""

    pass
