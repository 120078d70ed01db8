"""Domain-specific exceptions for the POS analytics engine.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from PosAnalyticsError for easy catching.
"""


class PosAnalyticsError(Exception):
    """Base exception for all POS analytics errors.

    Users can catch this exception to handle any error raised by the engine.
    """

    pass


class ConfigError(PosAnalyticsError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided (timezone, commission rates)
    - An unknown range selector is requested
    - Configuration files cannot be loaded or parsed
    """

    pass


class DataQualityError(PosAnalyticsError):
    """Raised when an input record set violates the engine's contract."""

    pass


class RecordContractError(DataQualityError):
    """Raised when a single sale record is malformed.

    This exception is raised when:
    - created_at is missing, unparseable or not timezone-aware
    - a sale carries no line items
    - a line item has a non-positive quantity or a negative price
    """

    pass
