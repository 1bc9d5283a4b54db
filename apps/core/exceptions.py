"""
Error taxonomy shared by the generation engine.

Caller mistakes subclass ValueError so API routers can keep mapping
`except ValueError` to HTTP 400, the same way the rest of the codebase does.
"""


class TasknestError(Exception):
    """Base class for engine errors."""


class RecurrenceError(TasknestError):
    """A recurrence rule could not be evaluated."""


class RecurrenceValidationError(RecurrenceError, ValueError):
    """Malformed recurrence rule (bad interval, weekday, month-day, month or count)."""


class UnsupportedFrequency(RecurrenceError, ValueError):
    """Frequency value is not one of daily/weekly/monthly/yearly."""

    def __init__(self, frequency):
        self.frequency = frequency
        super().__init__(f"Unsupported recurrence frequency: {frequency!r}")


class CatalogValidationError(TasknestError, ValueError):
    """A catalog template or milestone definition is invalid."""


class DuplicateGenerationDetected(TasknestError):
    """
    The ledger already holds a row for this generation key.

    Expected outcome of the uniqueness check; callers translate it into an
    "already generated" result.
    """

    def __init__(self, existing):
        self.existing = existing
        super().__init__(f"Generation key already recorded: {existing.generation_key}")


class PersistenceError(TasknestError):
    """Storage failure while writing a ledger entry or task row."""
