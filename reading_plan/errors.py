"""Exceptions raised by the reading plan engine and its store."""

from __future__ import annotations


class ReadingPlanError(Exception):
    """Base class for reading plan failures."""


class ConfigurationError(ReadingPlanError):
    """A plan's style configuration cannot be used (bad values, unknown start book)."""


class PreconditionFailed(ReadingPlanError):
    """The operation was called without the schedule or user it needs."""


class PersistenceError(ReadingPlanError):
    """The store could not read or apply an update."""
