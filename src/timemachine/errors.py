"""Exception hierarchy shared by the synthesis engine and its front ends."""

from __future__ import annotations


class TimeMachineError(Exception):
    """Base class for all TimeMachine failures."""


class RequestValidationFailure(TimeMachineError):
    """A generation request was rejected before touching the repository."""


class RepositoryError(TimeMachineError):
    """The version-control tool could not complete a required operation."""
