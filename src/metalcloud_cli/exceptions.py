"""Custom exception hierarchy for metalcloud-cli.

All exceptions that cross layer boundaries must inherit from
:class:`MetalCloudError`.  Raw transport exceptions (e.g. from httpx)
must NEVER propagate beyond the service layer — they must be caught
and re-raised as a typed subclass defined here.

Hierarchy
---------
MetalCloudError
├── ArgumentError
├── CommandNotFoundError
├── UnsupportedFormatError
├── RemoteCallError
├── ConfigurationError
└── EnvironmentError
"""

from __future__ import annotations


class MetalCloudError(Exception):
    """Base exception for all metalcloud-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ----------------------------------------------------------

class ArgumentError(MetalCloudError):
    """Raised when a required flag is missing or holds an invalid value."""


class CommandNotFoundError(MetalCloudError):
    """Raised when no registered command matches subject and predicate."""


# --- Rendering -------------------------------------------------------------

class UnsupportedFormatError(MetalCloudError):
    """Raised when the requested output format is not known."""


# --- Remote API ------------------------------------------------------------

class RemoteCallError(MetalCloudError):
    """Raised when the remote API call fails.

    The message is the remote error message, unaltered.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.code: int | None = code
        """JSON-RPC error code, when the server reported one."""


# --- Environment / configuration -------------------------------------------

class ConfigurationError(MetalCloudError):
    """Raised when required settings are missing or invalid."""


class EnvironmentError(MetalCloudError):
    """Raised when a required runtime dependency is not available."""
