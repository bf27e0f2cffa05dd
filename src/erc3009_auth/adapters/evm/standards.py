from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Tuple

from .constants import (
    TRANSFER_WITH_AUTHORIZATION_TYPE,
    RECEIVE_WITH_AUTHORIZATION_TYPE,
    CANCEL_AUTHORIZATION_TYPE,
    TRANSFER_WITH_AUTHORIZATION_TYPEHASH,
    RECEIVE_WITH_AUTHORIZATION_TYPEHASH,
    CANCEL_AUTHORIZATION_TYPEHASH,
)


# -----------------------------
# ERC-3009 authorization kinds
# -----------------------------

_TRANSFER_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("from", "address"),
    ("to", "address"),
    ("value", "uint256"),
    ("validAfter", "uint256"),
    ("validBefore", "uint256"),
    ("nonce", "bytes32"),
)

_CANCEL_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("authorizer", "address"),
    ("nonce", "bytes32"),
)


class AuthorizationKind(str, Enum):
    """
    The closed set of ERC-3009 authorization kinds.

    Each member carries its EIP-712 primary type name, canonical type
    string, pre-computed type hash and ordered field layout.

    Attributes:
        TRANSFER: ``transferWithAuthorization``; anyone may submit.
        RECEIVE: ``receiveWithAuthorization``; only the payee may submit.
        CANCEL: ``cancelAuthorization``; invalidates an unused nonce.
    """
    TRANSFER = "TransferWithAuthorization"
    RECEIVE = "ReceiveWithAuthorization"
    CANCEL = "CancelAuthorization"

    @property
    def primary_type(self) -> str:
        return self.value

    @property
    def type_string(self) -> str:
        return _TYPE_STRINGS[self]

    @property
    def type_hash(self) -> bytes:
        return _TYPE_HASHES[self]

    @property
    def fields(self) -> Tuple[Tuple[str, str], ...]:
        """Ordered ``(name, solidity_type)`` pairs of the struct."""
        return _CANCEL_FIELDS if self is AuthorizationKind.CANCEL else _TRANSFER_FIELDS

    @property
    def abi_types(self) -> List[str]:
        """ABI types of the struct-hash preimage, type hash first."""
        return ["bytes32"] + [sol_type for _, sol_type in self.fields]

    @property
    def contract_function(self) -> str:
        """Name of the token contract function consuming this authorization."""
        return _CONTRACT_FUNCTIONS[self]

    @property
    def type_hash_getter(self) -> str:
        """Name of the contract's public type-hash constant."""
        return _TYPE_HASH_GETTERS[self]


_TYPE_STRINGS: Dict[AuthorizationKind, str] = {
    AuthorizationKind.TRANSFER: TRANSFER_WITH_AUTHORIZATION_TYPE,
    AuthorizationKind.RECEIVE: RECEIVE_WITH_AUTHORIZATION_TYPE,
    AuthorizationKind.CANCEL: CANCEL_AUTHORIZATION_TYPE,
}

_TYPE_HASHES: Dict[AuthorizationKind, bytes] = {
    AuthorizationKind.TRANSFER: TRANSFER_WITH_AUTHORIZATION_TYPEHASH,
    AuthorizationKind.RECEIVE: RECEIVE_WITH_AUTHORIZATION_TYPEHASH,
    AuthorizationKind.CANCEL: CANCEL_AUTHORIZATION_TYPEHASH,
}

_CONTRACT_FUNCTIONS: Dict[AuthorizationKind, str] = {
    AuthorizationKind.TRANSFER: "transferWithAuthorization",
    AuthorizationKind.RECEIVE: "receiveWithAuthorization",
    AuthorizationKind.CANCEL: "cancelAuthorization",
}

_TYPE_HASH_GETTERS: Dict[AuthorizationKind, str] = {
    AuthorizationKind.TRANSFER: "TRANSFER_WITH_AUTHORIZATION_TYPEHASH",
    AuthorizationKind.RECEIVE: "RECEIVE_WITH_AUTHORIZATION_TYPEHASH",
    AuthorizationKind.CANCEL: "CANCEL_AUTHORIZATION_TYPEHASH",
}


# -----------------------------
# EIP-712 Domain
# -----------------------------

@dataclass
class EIP712Domain:
    """
    EIP-712 domain fields of an ERC-3009 token.

    The token contract hashes these into its ``DOMAIN_SEPARATOR``; knowing
    them allows the separator to be computed offline.
    """
    name: str
    version: str
    chainId: int
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }


# -----------------------------
# Typed-data envelope
# -----------------------------


@dataclass
class AuthorizationTypedData:
    """
    Container for ERC-3009 typed data usable with EIP-712 signing routines.

    ``to_dict()`` produces the ``{types, primaryType, domain, message}``
    layout consumed by ``eth_account.messages.encode_typed_data`` and
    ``eth_signTypedData_v4``, which lets wallets that only accept full
    typed data sign the same digest the digest engine computes.

    Attributes:
        domain: EIP712Domain instance describing the signing domain.
        kind: Which of the three authorization structs ``message`` holds.
        message: Field values keyed by their EIP-712 names.
    """
    domain: EIP712Domain
    kind: AuthorizationKind
    message: Dict[str, Any]

    types: Dict[str, List[Dict[str, str]]] = field(
        default_factory=lambda: {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
        }
    )

    def __post_init__(self):
        self.types.setdefault(
            self.kind.primary_type,
            [{"name": name, "type": sol_type} for name, sol_type in self.kind.fields],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": self.types,
            "primaryType": self.kind.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message,
        }
