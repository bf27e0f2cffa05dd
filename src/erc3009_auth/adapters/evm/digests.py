"""
EIP-712 Digest Engine for ERC-3009

Pure functions mapping ``(domain_separator, kind, params)`` to the 32-byte
digest a token holder signs.  Nothing here performs I/O or keeps state.

Layout
------
struct hash::

    keccak256(abi.encode(TYPEHASH, from, to, value, validAfter, validBefore, nonce))
    keccak256(abi.encode(TYPEHASH, authorizer, nonce))              # cancel

Timestamps are widened to ``uint256`` words, matching the on-chain struct
definitions.

digest::

    keccak256(0x19 0x01 || domain_separator || struct_hash)         # 66 bytes hashed

Every field value of the right width is accepted; the engine has no
semantic checks and no error path for well-typed input.
"""

import logging
from typing import Union

from eth_abi import encode
from eth_account.messages import SignableMessage
from eth_utils import keccak

from .constants import EIP712_DOMAIN_TYPEHASH, EIP712_PREFIX
from .schemas import (
    AuthorizationParams,
    CancelAuthorizationParams,
    TransferAuthorizationParams,
    normalize_address,
    normalize_bytes32,
)
from .standards import AuthorizationKind

logger = logging.getLogger(__name__)

Bytes32Like = Union[str, bytes]


def compute_eip712_digest(domain_separator: Bytes32Like, struct_hash: Bytes32Like) -> bytes:
    """
    Bind a struct hash to a domain: ``keccak256(0x1901 || domain || struct)``.
    """
    preimage = EIP712_PREFIX + normalize_bytes32(domain_separator) + normalize_bytes32(struct_hash)
    return keccak(preimage)


def compute_domain_separator(
    name: str,
    version: str,
    chain_id: int,
    verifying_contract: str,
) -> bytes:
    """
    Compute an EIP-712 domain separator from its fields.

    Useful when the token's domain ``name`` / ``version`` are known and no
    RPC round trip is wanted.  The value returned by the contract's
    ``DOMAIN_SEPARATOR()`` remains authoritative: a separator computed from
    wrong fields produces signatures the contract rejects.

    Args:
        name:               Domain ``name`` (e.g. ``"USD Coin"``).
        version:            Domain ``version`` (e.g. ``"2"``).
        chain_id:           EVM network ID.
        verifying_contract: Token contract address.
    """
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                EIP712_DOMAIN_TYPEHASH,
                keccak(text=name),
                keccak(text=version),
                chain_id,
                normalize_address(verifying_contract),
            ],
        )
    )


# ---------------------------------------------------------------------------
# Struct hashes
# ---------------------------------------------------------------------------

def _hash_transfer_struct(
    kind: AuthorizationKind,
    from_address: str,
    to_address: str,
    value: int,
    valid_after: int,
    valid_before: int,
    nonce: Bytes32Like,
) -> bytes:
    return keccak(
        encode(
            kind.abi_types,
            [
                kind.type_hash,
                normalize_address(from_address),
                normalize_address(to_address),
                value,
                valid_after,
                valid_before,
                normalize_bytes32(nonce),
            ],
        )
    )


def _hash_cancel_struct(authorizer: str, nonce: Bytes32Like) -> bytes:
    kind = AuthorizationKind.CANCEL
    return keccak(
        encode(
            kind.abi_types,
            [kind.type_hash, normalize_address(authorizer), normalize_bytes32(nonce)],
        )
    )


def struct_hash(kind: AuthorizationKind, params: AuthorizationParams) -> bytes:
    """
    Compute the EIP-712 struct hash of ``params`` as ``kind``.

    Raises:
        TypeError: If ``params`` does not match ``kind`` (cancel parameters
            for a transfer kind, or the reverse).
    """
    kind = AuthorizationKind(kind)
    if kind is AuthorizationKind.CANCEL:
        if not isinstance(params, CancelAuthorizationParams):
            raise TypeError(f"{kind.value} requires CancelAuthorizationParams, got {type(params).__name__}")
        return _hash_cancel_struct(params.authorizer, params.nonce)

    if not isinstance(params, TransferAuthorizationParams):
        raise TypeError(f"{kind.value} requires TransferAuthorizationParams, got {type(params).__name__}")
    return _hash_transfer_struct(
        kind,
        params.from_address,
        params.to_address,
        params.value,
        params.valid_after,
        params.valid_before,
        params.nonce,
    )


def authorization_digest(
    kind: AuthorizationKind,
    params: AuthorizationParams,
    domain_separator: Bytes32Like,
) -> bytes:
    """
    Compute the 32-byte signing digest of ``params`` as ``kind``.
    """
    digest = compute_eip712_digest(domain_separator, struct_hash(kind, params))
    logger.debug("Computed %s digest 0x%s", AuthorizationKind(kind).value, digest.hex())
    return digest


def build_signable(
    kind: AuthorizationKind,
    params: AuthorizationParams,
    domain_separator: Bytes32Like,
) -> SignableMessage:
    """
    Wrap the digest inputs in an ``eth_account`` ``SignableMessage``.

    The message has version ``0x01``, the domain separator as header and
    the struct hash as body, which is exactly how ``eth_account`` represents
    EIP-712 data.  Its hash equals ``authorization_digest``, so it can be
    passed to ``Account.sign_message`` / ``Account.recover_message``.
    """
    return SignableMessage(
        version=b"\x01",
        header=normalize_bytes32(domain_separator),
        body=struct_hash(kind, params),
    )


# ---------------------------------------------------------------------------
# Field-level entry points
# ---------------------------------------------------------------------------

def hash_transfer_with_authorization(
    domain_separator: Bytes32Like,
    from_address: str,
    to_address: str,
    value: int,
    valid_after: int,
    valid_before: int,
    nonce: Bytes32Like,
) -> bytes:
    """
    Compute the EIP-712 digest for ``transferWithAuthorization``.

    Args:
        domain_separator: The token contract's ``DOMAIN_SEPARATOR``.
        from_address:     Token holder authorizing the transfer.
        to_address:       Payee.
        value:            Amount to transfer.
        valid_after:      Unix timestamp after which the authorization is valid.
        valid_before:     Unix timestamp before which it must be used.
        nonce:            Unique 32-byte nonce.

    Returns:
        32-byte digest to sign.
    """
    return compute_eip712_digest(
        domain_separator,
        _hash_transfer_struct(
            AuthorizationKind.TRANSFER,
            from_address, to_address, value, valid_after, valid_before, nonce,
        ),
    )


def hash_receive_with_authorization(
    domain_separator: Bytes32Like,
    from_address: str,
    to_address: str,
    value: int,
    valid_after: int,
    valid_before: int,
    nonce: Bytes32Like,
) -> bytes:
    """
    Compute the EIP-712 digest for ``receiveWithAuthorization``.

    Same fields as the transfer digest; only the type hash differs, so a
    transfer signature can never be replayed as a receive and vice versa.
    """
    return compute_eip712_digest(
        domain_separator,
        _hash_transfer_struct(
            AuthorizationKind.RECEIVE,
            from_address, to_address, value, valid_after, valid_before, nonce,
        ),
    )


def hash_cancel_authorization(
    domain_separator: Bytes32Like,
    authorizer: str,
    nonce: Bytes32Like,
) -> bytes:
    """Compute the EIP-712 digest for ``cancelAuthorization``."""
    return compute_eip712_digest(domain_separator, _hash_cancel_struct(authorizer, nonce))
