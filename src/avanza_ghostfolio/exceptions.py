"""Exception hierarchy for the Avanza to Ghostfolio bridge.

All tool-specific exceptions derive from :class:`AvanzaGhostfolioError` so the
command-line entry point can report every failure from a single handler.
"""

from __future__ import annotations


class AvanzaGhostfolioError(Exception):
    """Base class for all errors raised by this package.

    Derived exceptions should extend this class so that callers can catch all
    tool-specific errors uniformly.
    """


class NotFoundError(AvanzaGhostfolioError):
    """Raised when a symbol search yields no matches."""


class InputAbortedError(AvanzaGhostfolioError):
    """Raised when the operator cancels an interactive prompt."""


class UpstreamError(AvanzaGhostfolioError):
    """Raised when a remote API call fails or returns an undecodable payload."""


class ConfigError(AvanzaGhostfolioError):
    """Raised when the configuration file is missing, unreadable or unwritable."""


class InputFileError(AvanzaGhostfolioError):
    """Raised when an input file cannot be read or parsed."""


class UnknownTransactionTypeError(AvanzaGhostfolioError):
    """Raised when a transaction export contains an unmapped type label."""


class UnsupportedInstrumentError(AvanzaGhostfolioError):
    """Raised when an operation is not available for an instrument kind."""


__all__ = [
    "AvanzaGhostfolioError",
    "NotFoundError",
    "InputAbortedError",
    "UpstreamError",
    "ConfigError",
    "InputFileError",
    "UnknownTransactionTypeError",
    "UnsupportedInstrumentError",
]
