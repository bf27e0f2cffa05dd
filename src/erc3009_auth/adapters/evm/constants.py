"""
ERC-3009 Constants and Environment Configuration

Fixed EIP-712 type-hash constants for the three ERC-3009 authorization
kinds, integer bounds for the ABI field widths, and environment-aware
accessors for the signer key and RPC endpoint used by the contract adapter.
"""

import os
from typing import Optional

import dotenv
from eth_utils import keccak

from ...engine.exceptions import ConfigurationError

dotenv.load_dotenv()

# ---------------------------------------------------------------------------
# EIP-712 type strings and type hashes
# ---------------------------------------------------------------------------

TRANSFER_WITH_AUTHORIZATION_TYPE: str = (
    "TransferWithAuthorization(address from,address to,uint256 value,"
    "uint256 validAfter,uint256 validBefore,bytes32 nonce)"
)
RECEIVE_WITH_AUTHORIZATION_TYPE: str = (
    "ReceiveWithAuthorization(address from,address to,uint256 value,"
    "uint256 validAfter,uint256 validBefore,bytes32 nonce)"
)
CANCEL_AUTHORIZATION_TYPE: str = "CancelAuthorization(address authorizer,bytes32 nonce)"

#: keccak256(TRANSFER_WITH_AUTHORIZATION_TYPE), as deployed in FiatTokenV2 (USDC).
TRANSFER_WITH_AUTHORIZATION_TYPEHASH: bytes = bytes.fromhex(
    "7c7c6cdb67a18743f49ec6fa9b35f50d52ed05cbed4cc592e13b44501c1a2267"
)
#: keccak256(RECEIVE_WITH_AUTHORIZATION_TYPE)
RECEIVE_WITH_AUTHORIZATION_TYPEHASH: bytes = bytes.fromhex(
    "d099cc98ef71107a616c4f0f941f04c322d8e254fe26b3c6668db87aae413de8"
)
#: keccak256(CANCEL_AUTHORIZATION_TYPE)
CANCEL_AUTHORIZATION_TYPEHASH: bytes = bytes.fromhex(
    "158b0a9edf7a828aad02f63cd515c68ef2f50ba807396f6d12842833a1597429"
)

EIP712_DOMAIN_TYPE: str = (
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
EIP712_DOMAIN_TYPEHASH: bytes = keccak(text=EIP712_DOMAIN_TYPE)

#: Prefix of every EIP-712 digest preimage ("\x19\x01").
EIP712_PREFIX: bytes = b"\x19\x01"

# ---------------------------------------------------------------------------
# Field widths
# ---------------------------------------------------------------------------

MAX_UINT64: int = 2**64 - 1
MAX_UINT256: int = 2**256 - 1

ADDRESS_LENGTH: int = 20
BYTES32_LENGTH: int = 32
SIGNATURE_LENGTH: int = 65

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

_DEFAULT_REQUEST_TIMEOUT: int = 60


def get_private_key_from_env() -> Optional[str]:
    """
    Load the EVM private key from environment variables.

    Environment Variable:
        - evm_private_key: Hex-encoded secp256k1 private key (0x prefix optional)

    Returns:
        str: Private key from environment, or None if not configured

    Note:
        The private key should be stored securely in environment variables
        and never committed to version control.
    """
    return os.getenv("evm_private_key") or None


def get_rpc_url_from_env() -> Optional[str]:
    """
    Load the JSON-RPC endpoint used by the contract adapter.

    Environment Variable:
        - evm_rpc_url: HTTP(S) JSON-RPC URL of an EVM node

    Returns:
        str: RPC URL, or None if not configured
    """
    return os.getenv("evm_rpc_url") or None


def get_request_timeout_from_env() -> int:
    """
    Load the RPC request timeout (seconds), defaulting to 60.

    Raises:
        ConfigurationError: If ``evm_request_timeout`` is set but is not a
            positive integer.
    """
    raw = os.getenv("evm_request_timeout")
    if not raw:
        return _DEFAULT_REQUEST_TIMEOUT
    try:
        timeout = int(raw)
    except ValueError:
        raise ConfigurationError(f"evm_request_timeout must be an integer, got {raw!r}")
    if timeout <= 0:
        raise ConfigurationError(f"evm_request_timeout must be positive, got {timeout}")
    return timeout
