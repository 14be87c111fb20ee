"""
Exceptions for mihari.

Provides detailed error information for debugging modem communication issues.
"""

from typing import Optional


class MihariError(Exception):
    """
    Base exception for mihari errors.

    All mihari exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        response: Optional[str] = None
    ) -> None:
        """
        Initialize exception with context.

        Args:
            message: Error description
            command: AT command that caused the error (if applicable)
            response: Raw modem response (if applicable)
        """
        self.command = command
        self.response = response
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with context."""
        parts = [super().__str__()]

        if self.command:
            parts.append(f"Command: {self.command}")

        if self.response:
            parts.append(f"Response: {self.response!r}")

        return " | ".join(parts)


class TransportUnavailable(MihariError):
    """
    Raised when the serial transport fails.

    This indicates:
    - Serial device cannot be opened
    - Read or write failed at the byte level
    - Read timed out before a complete line arrived
    """

    def __init__(self, port: str, reason: str = "is not available", **kwargs) -> None:
        self.port = port
        super().__init__(f"{port} {reason}", **kwargs)


class ATParseError(MihariError):
    """
    Raised when an AT command response cannot be decoded.

    Base class for all decode failures.
    """
    pass


class NotAttached(ATParseError):
    """
    Raised when the serving cell state is SEARCH.

    The modem has no network attachment, so no cell info exists for this poll.
    """
    pass


class ModeNotResponded(ATParseError):
    """Raised when the serving cell marker is missing from the response."""
    pass


class RATNotResponded(ATParseError):
    """Raised when the serving cell state is present but the RAT is not."""
    pass


class FieldNotPresent(ATParseError):
    """Raised when a required identity field is missing from the response."""

    def __init__(self, field: str, **kwargs) -> None:
        self.field = field
        super().__init__(f"{field} was not responded", **kwargs)


class IdentityNotPresent(FieldNotPresent):
    """Raised when the ATI response lacks the manufacturer/model/revision lines."""

    def __init__(self, **kwargs) -> None:
        super().__init__("identity", **kwargs)


class NumericConversionFailed(ATParseError):
    """Raised when a non-sentinel token is not a valid integer."""

    def __init__(self, field: str, token: str, **kwargs) -> None:
        self.field = field
        self.token = token
        super().__init__(f"{field} is not a number, got {token!r}", **kwargs)


class UnsupportedModel(MihariError):
    """Raised when no command table exists for the reported modem model."""

    def __init__(self, model: str, **kwargs) -> None:
        self.model = model
        super().__init__(f"modem model {model!r} is not supported", **kwargs)


class ConfigError(MihariError):
    """Raised when the configuration file is missing, unreadable or invalid."""
    pass


class ForwarderError(MihariError):
    """Raised when telemetry cannot be delivered to the collector."""
    pass
