"""
Domain errors raised by the core.

Every error the core can raise derives from TrainerDeskError, so the API
layer can catch the whole family in one place and translate each kind
into a status code and message. The core itself never logs or recovers.
"""


class TrainerDeskError(Exception):
    """Base class for all domain errors."""
    pass


class InvalidDate(TrainerDeskError):
    """A date string could not be parsed into a real calendar date."""
    pass


class InvalidFormat(TrainerDeskError):
    """A time-of-day string is not a valid 24-hour HH:MM value."""
    pass


class InvalidAmount(TrainerDeskError):
    """A money or weight amount is missing, non-numeric, or not positive."""
    pass


class InvalidBillingCycle(TrainerDeskError):
    """
    The resolver produced a month/year outside the accepted bounds.

    This points at corrupt upstream dates and is never recovered by clamping.
    """
    pass


class MissingSelection(TrainerDeskError):
    """A schedule request selected zero days of the week."""
    pass


class InvalidSchedule(TrainerDeskError):
    """A schedule block is malformed (bad weekday or end not after start)."""
    pass
