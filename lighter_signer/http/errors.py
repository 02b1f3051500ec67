# -------------------------------------------------------------------------------------------------
#  Copyright (C) 2015-2025 Nautech Systems Pty Ltd. All rights reserved.
#  https://nautechsystems.io
#
#  Licensed under the GNU Lesser General Public License Version 3.0 (the "License");
#  You may not use this file except in compliance with the License.
#  You may obtain a copy of the License at https://www.gnu.org/licenses/lgpl-3.0.en.html
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
# -------------------------------------------------------------------------------------------------

from __future__ import annotations

from typing import Any

from lighter_signer.common.utils import is_nonce_error


class LighterHttpError(Exception):
    """
    The base class for all Lighter HTTP errors.

    Parameters
    ----------
    status : int
        The HTTP status code of the response.
    message : Any
        The decoded error payload (usually a dict with ``code``/``message``).
    headers : dict[str, Any]
        The response headers.
    """

    def __init__(self, status: int, message: Any, headers: dict[str, Any]) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.headers = headers

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"

    def __str__(self) -> str:
        if isinstance(self.message, dict):
            text = self.message.get("message") or self.message.get("error")
            code = self.message.get("code")
            if text is not None:
                return f"status={self.status} code={code} {text}"
        return f"status={self.status} {self.message}"

    def is_nonce_error(self) -> bool:
        """Return whether the venue rejected the request because of its nonce."""
        return is_nonce_error(self.message)


class LighterClientError(LighterHttpError):
    """Represents an HTTP 4xx response (or an unusable response body)."""


class LighterServerError(LighterHttpError):
    """Represents an HTTP 5xx response."""
