"""Exception hierarchy for the application."""

from __future__ import annotations


class ClobsterError(Exception):
    """Base class for every error the application raises."""

    prefix = ""
    recoverable = False

    def __init__(self, message: object = "") -> None:
        self.message = str(message)
        super().__init__(f"{self.prefix}{self.message}")

    def is_recoverable(self) -> bool:
        """Whether the user may simply retry the failed operation."""
        return self.recoverable


class TerminalError(ClobsterError):
    """Terminal or TUI failure."""

    prefix = "Terminal error: "


class ApiError(ClobsterError):
    """Failure reported by the remote market API."""

    prefix = "API error: "


class ConfigError(ClobsterError):
    """Invalid or unreadable configuration."""

    prefix = "Configuration error: "


class SerializationError(ClobsterError):
    """Failure to encode or decode data."""

    prefix = "Serialization error: "


class ChannelError(ClobsterError):
    """Failure to deliver a message between components."""

    prefix = "Channel error: "
    recoverable = True


class AuthError(ClobsterError):
    """Operation requires authentication that is missing or invalid."""

    prefix = "Authentication error: "


class WalletError(ClobsterError):
    """Wallet or signing failure."""

    prefix = "Wallet error: "


class InvalidInputError(ClobsterError):
    """Invalid input or state."""

    prefix = "Invalid input: "


class NetworkError(ClobsterError):
    """Network connectivity failure."""

    prefix = "Network error: "
    recoverable = True


class RateLimitedError(ClobsterError):
    """The remote side asked us to slow down."""

    recoverable = True

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited: retry after {retry_after} seconds")


class ApplicationError(ClobsterError):
    """Generic application failure."""