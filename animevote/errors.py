# animevote/errors.py
from __future__ import annotations


class CycleError(Exception):
    """Base class for vote-cycle domain errors."""


class NotFoundError(CycleError):
    """Week / quarter / season lookup miss."""


class InvalidTransitionError(CycleError):
    """
    A state-machine guard was violated (e.g. closing a week that is not OPEN).
    For a rollover this means the transition already happened: do not retry.
    """


class VoteClosedError(InvalidTransitionError):
    """Vote attempted outside an OPEN week's window."""


class AuthRequiredError(CycleError):
    """No member id and no vote cookie: anonymous voting is not allowed."""


class RaceLostError(CycleError):
    """A concurrent writer won a find-or-create or rollover. Safe to retry."""
