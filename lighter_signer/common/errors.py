"""Exceptions raised for programmer and setup errors.

Expected failures of a transaction (signing, rejection, transport) are not
raised; they are returned as ``LighterResult`` values.
"""

from __future__ import annotations


class LighterError(Exception):
    """Base class for all Lighter signer client exceptions."""


class LighterConfigError(LighterError, ValueError):
    """Malformed API key range / private key setup, or an unsupported nonce mode."""


class LighterApiKeyError(LighterError, ValueError):
    """The requested API key / nonce combination cannot be resolved."""


class LighterSignerError(LighterError, RuntimeError):
    """The native signer could not be loaded, activated or switched."""
