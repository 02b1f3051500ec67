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
"""
Lighter transaction signer client.

This package exposes the ``SignerClient`` (nonce management, native signing and
``sendTx`` submission for one account) and the types it returns.
"""

from lighter_signer.common.constants import LIGHTER
from lighter_signer.common.enums import LighterOrderType
from lighter_signer.common.enums import LighterTimeInForce
from lighter_signer.common.enums import LighterTxType
from lighter_signer.common.enums import NonceManagerType
from lighter_signer.common.errors import LighterApiKeyError
from lighter_signer.common.errors import LighterConfigError
from lighter_signer.common.errors import LighterError
from lighter_signer.common.errors import LighterSignerError
from lighter_signer.common.nonce import NonceManager
from lighter_signer.common.nonce import OptimisticNonceManager
from lighter_signer.common.nonce import PessimisticNonceManager
from lighter_signer.common.nonce import nonce_manager_factory
from lighter_signer.common.signer import LighterSignerLibrary
from lighter_signer.common.signer import create_api_key
from lighter_signer.common.types import LighterResult
from lighter_signer.common.types import LighterTxError
from lighter_signer.common.types import LighterTxErrorKind
from lighter_signer.common.types import LighterTxSubmission
from lighter_signer.config import LighterCredentials
from lighter_signer.config import LighterRateLimitConfig
from lighter_signer.config import SignerClientConfig
from lighter_signer.signer_client import SignerClient

__all__ = [
    "LIGHTER",
    "LighterApiKeyError",
    "LighterConfigError",
    "LighterCredentials",
    "LighterError",
    "LighterOrderType",
    "LighterRateLimitConfig",
    "LighterResult",
    "LighterSignerError",
    "LighterSignerLibrary",
    "LighterTimeInForce",
    "LighterTxError",
    "LighterTxErrorKind",
    "LighterTxSubmission",
    "LighterTxType",
    "NonceManager",
    "NonceManagerType",
    "OptimisticNonceManager",
    "PessimisticNonceManager",
    "SignerClient",
    "SignerClientConfig",
    "create_api_key",
    "nonce_manager_factory",
]
