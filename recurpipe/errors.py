class RecurrenceError(Exception):
    """Base class for errors raised while expanding a recurrence rule."""


class UnproducibleRuleError(RecurrenceError, ValueError):
    """
    Raised when a pipeline stage sees too many empty sets in a row.

    The rule cannot produce any more instances, usually because its parts
    contradict each other (e.g. February 30th). The iteration must be
    abandoned; retrying the same chain fails again.
    """


class CalendarOverflowError(RecurrenceError):
    """Raised when the next recurrence period lies beyond the supported years."""
