"""
Exceptions raised by the scheduling engine.

Only programmer errors (too few teams or qualifiers, a team paired with
itself) are raised. Everything else is reported as data on the result
objects.
"""


class SchedulerError(Exception):
    """Base exception for scheduler errors"""
    pass


class InvalidInputError(SchedulerError, ValueError):
    """Input cannot be scheduled at all; the caller must not proceed"""
    pass
