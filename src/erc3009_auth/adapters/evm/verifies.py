"""
ERC-3009 Signature Verification Helpers

Off-chain checks mirroring what the token contract does before it accepts
an authorization: recover the signer of the EIP-712 digest and compare it
to the authorizer, and test the validity window against a clock.

These are pre-flight helpers.  The contract remains authoritative; in
particular nonce state can only be observed through
``AuthorizationAdapter.get_authorization_state``.
"""

import logging
import time
from typing import Optional, Union

from eth_account import Account

from .digests import build_signable
from .schemas import (
    AuthorizationParams,
    CancelAuthorizationParams,
    EVMECDSASignature,
    TransferAuthorizationParams,
    normalize_address,
)
from .standards import AuthorizationKind

logger = logging.getLogger(__name__)

Bytes32Like = Union[str, bytes]


def recover_authorizer(
    kind: AuthorizationKind,
    params: AuthorizationParams,
    domain_separator: Bytes32Like,
    signature: EVMECDSASignature,
) -> str:
    """
    Recover the address that signed ``params`` as ``kind``.

    Returns:
        Checksum address of the signer.

    Raises:
        TypeError: If ``params`` does not match ``kind``.
        Exception: Whatever ``eth_account`` raises for an unrecoverable signature.
    """
    signable = build_signable(kind, params, domain_separator)
    return Account.recover_message(signable, vrs=signature.vrs())


def verify_authorization_signature(
    kind: AuthorizationKind,
    params: AuthorizationParams,
    domain_separator: Bytes32Like,
    signature: EVMECDSASignature,
    expected_signer: Optional[str] = None,
) -> bool:
    """
    Check that ``signature`` was produced by the authorizer of ``params``.

    Args:
        kind:             Authorization kind the signature claims to cover.
        params:           Authorization parameters.
        domain_separator: Domain separator the signature was made under.
        signature:        Signature to check.
        expected_signer:  Address that must have signed.  Defaults to
                          ``params.from_address`` (transfer / receive) or
                          ``params.authorizer`` (cancel).

    Returns:
        ``True`` if the recovered signer matches, ``False`` otherwise.
        A signature that cannot be recovered at all is reported as ``False``.
    """
    if expected_signer is None:
        if isinstance(params, CancelAuthorizationParams):
            expected_signer = params.authorizer
        elif isinstance(params, TransferAuthorizationParams):
            expected_signer = params.from_address
        else:
            raise TypeError(f"Unsupported authorization parameters: {type(params).__name__}")

    signable = build_signable(kind, params, domain_separator)
    try:
        recovered = Account.recover_message(signable, vrs=signature.vrs())
    except Exception as e:
        logger.debug("Signature recovery failed for %s: %s", AuthorizationKind(kind).value, e)
        return False

    return recovered == normalize_address(expected_signer)


def check_time_window(
    params: TransferAuthorizationParams,
    current_time: Optional[int] = None,
) -> bool:
    """
    Return whether ``params`` is inside its validity window.

    The window is ``valid_after <= now < valid_before``.  An inverted or
    empty window is simply never valid.

    Args:
        params:       Transfer / receive authorization parameters.
        current_time: Unix timestamp to test against; defaults to now.
    """
    now = int(current_time) if current_time is not None else int(time.time())
    return params.valid_after <= now < params.valid_before
