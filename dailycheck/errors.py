"""Exceptions raised by DailyCheck."""


class DailyCheckError(Exception):
    """Base class for DailyCheck errors."""


class ConfigurationError(DailyCheckError):
    """Raised when settings cannot be projected onto the backend rule records.

    Happens when no rule-record collection has been loaded for the account,
    so there is nothing to patch against.
    """


class BackendError(DailyCheckError):
    """Raised when a write to the backend fails."""
