from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from lighter_signer.common.constants import MINUTE
from lighter_signer.common.types import LighterResult


# (deadline_secs, timestamp) -> token
AuthTokenIssuer = Callable[[int, int], LighterResult[str]]


@dataclass(slots=True)
class LighterAuthManager:
    """Lightweight auth token manager for short-lived Lighter tokens.

    Caches a token and refreshes it ahead of expiry to avoid frequent re-signing.
    Issuance failures are returned as-is and never cached.
    ``time_source`` returns the current UNIX time in seconds.
    """

    issuer: AuthTokenIssuer
    time_source: Callable[[], float] = time.time
    default_horizon_secs: int = 10 * MINUTE
    refresh_buffer_secs: int = MINUTE

    _token: Optional[str] = None
    _expires_at: int = 0

    def token(self, horizon_secs: Optional[int] = None, force: bool = False) -> LighterResult[str]:
        """Return a valid token, refreshing if necessary.

        This method is synchronous because the underlying signer call is local
        (ctypes into lighter-go) and does not perform I/O.
        """
        now = int(self.time_source())
        if (not force) and self._token and now < self._expires_at - self.refresh_buffer_secs:
            return LighterResult.success(self._token)
        return self.refresh(horizon_secs=horizon_secs)

    def refresh(self, horizon_secs: Optional[int] = None) -> LighterResult[str]:
        """Force-generate a new token regardless of cache state."""
        now = int(self.time_source())
        horizon = int(horizon_secs or self.default_horizon_secs)
        result = self.issuer(horizon, now)
        if not result.ok:
            self.invalidate()
            return result
        self._token = result.value
        self._expires_at = now + horizon
        return result

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = 0

    @property
    def expires_at(self) -> int:
        return self._expires_at
