"""
ERC-3009 Off-Chain Signing

Sign ``transferWithAuthorization``, ``receiveWithAuthorization`` and
``cancelAuthorization`` messages.  Each helper computes the EIP-712 digest
with the digest engine and hands the raw 32 bytes to a signer; the digest
already commits to the domain and the struct, so it is signed as-is.

Every operation comes in two forms:

``sign_*_authorization``
    Coroutine; works with any :class:`DigestSigner`, including remote and
    hardware signers that suspend.

``sign_*_authorization_sync``
    Blocking; requires a :class:`SyncDigestSigner` (in-memory keys).

ECDSA nonces (``k``) are deterministic in ``eth_account`` but not
necessarily in other backends, so two signatures over the same digest may
differ byte-for-byte while both verifying.

Failures of the signer are raised as :class:`AuthorizationSigningError`
with the original exception chained.  Nothing is retried.

Example::

    signer = LocalAccountSigner.from_key("0xYOUR_PRIVATE_KEY")
    params = TransferAuthorizationParams.with_duration(
        from_address=signer.address,
        to_address="0xRecipientAddress",
        value=1_000_000,            # 1 USDC (6 decimals)
        duration_seconds=3600,
        nonce=generate_nonce(),
    )
    domain_separator = await adapter.get_domain_separator(usdc_address)
    signature = await sign_transfer_authorization(params, domain_separator, signer)
"""

import logging
from typing import Union

from ...engine.exceptions import AuthorizationSigningError
from .digests import authorization_digest
from .schemas import (
    AuthorizationParams,
    CancelAuthorizationParams,
    EVMECDSASignature,
    TransferAuthorizationParams,
)
from .signers import DigestSigner, SyncDigestSigner
from .standards import AuthorizationKind

logger = logging.getLogger(__name__)

Bytes32Like = Union[str, bytes]


def _check_signature(signature: object, signer: DigestSigner) -> EVMECDSASignature:
    if not isinstance(signature, EVMECDSASignature):
        raise AuthorizationSigningError(
            f"Signer {signer!r} returned {type(signature).__name__}, expected EVMECDSASignature"
        )
    try:
        signature.validate_format()
    except ValueError as e:
        raise AuthorizationSigningError(f"Signer {signer!r} returned a malformed signature: {e}") from e
    return signature


async def sign_authorization(
    kind: AuthorizationKind,
    params: AuthorizationParams,
    domain_separator: Bytes32Like,
    signer: DigestSigner,
) -> EVMECDSASignature:
    """
    Sign ``params`` as ``kind`` under ``domain_separator``.

    Args:
        kind:             Which authorization struct to sign.
        params:           Authorization parameters matching ``kind``.
        domain_separator: The token contract's ``DOMAIN_SEPARATOR``.
        signer:           Signer holding the authorizer's key.

    Returns:
        EVMECDSASignature with ``v`` in {27, 28}.

    Raises:
        TypeError: If ``params`` does not match ``kind``.
        AuthorizationSigningError: If the signer fails.
    """
    digest = authorization_digest(kind, params, domain_separator)
    try:
        signature = await signer.sign_digest(digest)
    except AuthorizationSigningError:
        raise
    except Exception as e:
        raise AuthorizationSigningError(f"Signing {AuthorizationKind(kind).value} failed: {e}") from e
    signature = _check_signature(signature, signer)
    logger.debug("Signed %s with %s", AuthorizationKind(kind).value, signer.address)
    return signature


def sign_authorization_sync(
    kind: AuthorizationKind,
    params: AuthorizationParams,
    domain_separator: Bytes32Like,
    signer: SyncDigestSigner,
) -> EVMECDSASignature:
    """
    Blocking variant of :func:`sign_authorization`.

    Raises:
        TypeError: If ``params`` does not match ``kind`` or ``signer``
            cannot sign synchronously.
        AuthorizationSigningError: If the signer fails.
    """
    if not isinstance(signer, SyncDigestSigner):
        raise TypeError(
            f"{type(signer).__name__} cannot sign synchronously; use the async signing functions"
        )
    digest = authorization_digest(kind, params, domain_separator)
    try:
        signature = signer.sign_digest_sync(digest)
    except AuthorizationSigningError:
        raise
    except Exception as e:
        raise AuthorizationSigningError(f"Signing {AuthorizationKind(kind).value} failed: {e}") from e
    signature = _check_signature(signature, signer)
    logger.debug("Signed %s with %s", AuthorizationKind(kind).value, signer.address)
    return signature


# ---------------------------------------------------------------------------
# transferWithAuthorization
# ---------------------------------------------------------------------------

async def sign_transfer_authorization(
    params: TransferAuthorizationParams,
    domain_separator: Bytes32Like,
    signer: DigestSigner,
) -> EVMECDSASignature:
    """
    Sign a ``transferWithAuthorization`` message.

    The resulting authorization can be submitted by anyone, which makes it
    open to front-running; use :func:`sign_receive_authorization` when the
    payee must be the submitter.
    """
    return await sign_authorization(AuthorizationKind.TRANSFER, params, domain_separator, signer)


def sign_transfer_authorization_sync(
    params: TransferAuthorizationParams,
    domain_separator: Bytes32Like,
    signer: SyncDigestSigner,
) -> EVMECDSASignature:
    return sign_authorization_sync(AuthorizationKind.TRANSFER, params, domain_separator, signer)


# ---------------------------------------------------------------------------
# receiveWithAuthorization
# ---------------------------------------------------------------------------

async def sign_receive_authorization(
    params: TransferAuthorizationParams,
    domain_separator: Bytes32Like,
    signer: DigestSigner,
) -> EVMECDSASignature:
    """
    Sign a ``receiveWithAuthorization`` message.

    The contract only accepts it when ``msg.sender == params.to_address``.
    """
    return await sign_authorization(AuthorizationKind.RECEIVE, params, domain_separator, signer)


def sign_receive_authorization_sync(
    params: TransferAuthorizationParams,
    domain_separator: Bytes32Like,
    signer: SyncDigestSigner,
) -> EVMECDSASignature:
    return sign_authorization_sync(AuthorizationKind.RECEIVE, params, domain_separator, signer)


# ---------------------------------------------------------------------------
# cancelAuthorization
# ---------------------------------------------------------------------------

async def sign_cancel_authorization(
    params: CancelAuthorizationParams,
    domain_separator: Bytes32Like,
    signer: DigestSigner,
) -> EVMECDSASignature:
    """Sign a ``cancelAuthorization`` message for ``(authorizer, nonce)``."""
    return await sign_authorization(AuthorizationKind.CANCEL, params, domain_separator, signer)


def sign_cancel_authorization_sync(
    params: CancelAuthorizationParams,
    domain_separator: Bytes32Like,
    signer: SyncDigestSigner,
) -> EVMECDSASignature:
    return sign_authorization_sync(AuthorizationKind.CANCEL, params, domain_separator, signer)
