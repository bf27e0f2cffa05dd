"""
ERC-3009 Schema Models

Pydantic models for ERC-3009 authorization parameters and the ECDSA
signatures produced over their EIP-712 digests.  All classes inherit from
the base schema hierarchy in ``schemas.bases`` and are frozen value
objects with structural equality.

Authorization classes:
    - TransferAuthorizationParams: ``transferWithAuthorization`` /
      ``receiveWithAuthorization`` fields (the two kinds share a layout).
    - CancelAuthorizationParams: ``cancelAuthorization`` fields.

Signature classes:
    - EVMECDSASignature: v/r/s signature with the legacy 27/28 parity byte.

Construction normalizes field widths only.  An address must be 20 bytes, a
nonce 32 bytes, ``value`` must fit in uint256 and timestamps in uint64;
anything else is a type error.  Semantic checks (empty or inverted time
window, ``from == to``) are deliberately absent: the consuming contract is
the only judge of whether an authorization is usable.
"""

import logging
from typing import Any, Dict, Literal, Tuple, Union

from eth_utils import is_hex_address, to_checksum_address
from pydantic import Field, field_serializer, field_validator

from ...schemas.bases import BaseAuthorization, BaseSignature
from .constants import (
    ADDRESS_LENGTH,
    BYTES32_LENGTH,
    MAX_UINT64,
    MAX_UINT256,
    SIGNATURE_LENGTH,
)
from .nonces import create_time_bounds

logger = logging.getLogger(__name__)

AddressLike = Union[str, bytes]
Bytes32Like = Union[str, bytes]


def normalize_address(value: Any) -> str:
    """Normalize a 20-byte address (hex string or raw bytes) to checksum form."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_LENGTH:
            raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(value)}")
        return to_checksum_address("0x" + bytes(value).hex())
    if isinstance(value, str) and is_hex_address(value):
        return to_checksum_address(value)
    raise ValueError(f"expected a 20-byte address, got {value!r}")


def normalize_bytes32(value: Any) -> bytes:
    """Normalize a 32-byte value (hex string or raw bytes) to ``bytes``."""
    if isinstance(value, str):
        hex_str = value[2:] if value[:2] in ("0x", "0X") else value
        if len(hex_str) != BYTES32_LENGTH * 2:
            raise ValueError(f"expected {BYTES32_LENGTH * 2} hex chars, got {len(hex_str)}")
        value = bytes.fromhex(hex_str)
    if isinstance(value, (bytes, bytearray)):
        if len(value) != BYTES32_LENGTH:
            raise ValueError(f"expected {BYTES32_LENGTH} bytes, got {len(value)}")
        return bytes(value)
    raise ValueError(f"expected a 32-byte value, got {value!r}")


class TransferAuthorizationParams(BaseAuthorization):
    """
    Parameters of a ``transferWithAuthorization`` or
    ``receiveWithAuthorization`` instruction.

    Moves ``value`` units from ``from_address`` to ``to_address``, usable
    only while ``valid_after <= now < valid_before`` and only once per
    ``nonce``.  The same instance can be signed as either kind; the kind
    chosen at signing time selects the type hash.

    The EIP names ``from`` / ``to`` are accepted as aliases, since ``from``
    is a Python keyword.

    Attributes:
        from_address: Token holder authorizing the transfer (``from``).
        to_address: Payee (``to``).
        value: Amount in the token's smallest unit (uint256).
        valid_after: Unix timestamp from which the authorization is usable.
        valid_before: Unix timestamp at which the authorization expires.
        nonce: 32 random bytes; unique per authorizer.

    Example::

        params = TransferAuthorizationParams.with_duration(
            from_address=alice,
            to_address=bob,
            value=1_000_000,          # 1 USDC (6 decimals)
            duration_seconds=3600,
            nonce=generate_nonce(),
        )
    """

    from_address: str = Field(..., alias="from", description="Authorizer address (`from` in EIP-3009)")
    to_address: str = Field(..., alias="to", description="Payee address (`to` in EIP-3009)")
    value: int = Field(..., ge=0, le=MAX_UINT256, description="Amount in smallest token units (uint256)")
    valid_after: int = Field(..., ge=0, le=MAX_UINT64, description="Start of validity window (unix seconds)")
    valid_before: int = Field(..., ge=0, le=MAX_UINT64, description="End of validity window, exclusive (unix seconds)")
    nonce: bytes = Field(..., description="Unique 32-byte nonce")

    @field_validator("from_address", "to_address", mode="before")
    @classmethod
    def _normalize_address(cls, v: Any) -> str:
        return normalize_address(v)

    @field_validator("nonce", mode="before")
    @classmethod
    def _normalize_nonce(cls, v: Any) -> bytes:
        return normalize_bytes32(v)

    @field_serializer("nonce", when_used="json")
    def _serialize_nonce(self, nonce: bytes) -> str:
        return "0x" + nonce.hex()

    @classmethod
    def with_duration(
        cls,
        from_address: AddressLike,
        to_address: AddressLike,
        value: int,
        duration_seconds: int,
        nonce: Bytes32Like,
    ) -> "TransferAuthorizationParams":
        """
        Create an authorization valid from now for ``duration_seconds``.

        Both bounds come from one clock sample, so
        ``valid_before - valid_after == duration_seconds`` exactly.
        """
        valid_after, valid_before = create_time_bounds(duration_seconds)
        return cls(
            from_address=from_address,
            to_address=to_address,
            value=value,
            valid_after=valid_after,
            valid_before=valid_before,
            nonce=nonce,
        )

    @classmethod
    def without_time_bounds(
        cls,
        from_address: AddressLike,
        to_address: AddressLike,
        value: int,
        nonce: Bytes32Like,
    ) -> "TransferAuthorizationParams":
        """
        Create an authorization that is valid immediately and indefinitely.

        Sets ``valid_after = 0`` and ``valid_before = 2**64 - 1``.  Not
        recommended: it removes all time-based replay mitigation and leaves
        nonce uniqueness as the only protection.  Prefer ``with_duration``.
        """
        logger.warning(
            "Creating ERC-3009 authorization without time bounds for %s; "
            "only nonce uniqueness protects it from replay",
            from_address,
        )
        return cls(
            from_address=from_address,
            to_address=to_address,
            value=value,
            valid_after=0,
            valid_before=MAX_UINT64,
            nonce=nonce,
        )

    def to_message(self) -> Dict[str, Any]:
        return {
            "from": self.from_address,
            "to": self.to_address,
            "value": self.value,
            "validAfter": self.valid_after,
            "validBefore": self.valid_before,
            "nonce": self.nonce,
        }


class CancelAuthorizationParams(BaseAuthorization):
    """
    Parameters of a ``cancelAuthorization`` instruction.

    Invalidates the not-yet-used authorization identified by
    ``(authorizer, nonce)``.

    Attributes:
        authorizer: Address that issued the authorization being canceled.
        nonce: Nonce of the authorization being canceled.
    """

    authorizer: str = Field(..., description="Address that issued the authorization")
    nonce: bytes = Field(..., description="Nonce of the authorization to cancel")

    @field_validator("authorizer", mode="before")
    @classmethod
    def _normalize_address(cls, v: Any) -> str:
        return normalize_address(v)

    @field_validator("nonce", mode="before")
    @classmethod
    def _normalize_nonce(cls, v: Any) -> bytes:
        return normalize_bytes32(v)

    @field_serializer("nonce", when_used="json")
    def _serialize_nonce(self, nonce: bytes) -> str:
        return "0x" + nonce.hex()

    def to_message(self) -> Dict[str, Any]:
        return {
            "authorizer": self.authorizer,
            "nonce": self.nonce,
        }


AuthorizationParams = Union[TransferAuthorizationParams, CancelAuthorizationParams]


def _to_word_hex(value: Any) -> str:
    if isinstance(value, int):
        if value < 0 or value > MAX_UINT256:
            raise ValueError("signature component out of range")
        return "0x" + format(value, "064x")
    if isinstance(value, (bytes, bytearray)):
        if len(value) > BYTES32_LENGTH:
            raise ValueError(f"signature component longer than {BYTES32_LENGTH} bytes")
        return "0x" + bytes(value).hex().zfill(64)
    if isinstance(value, str):
        hex_str = value[2:] if value[:2] in ("0x", "0X") else value
        if len(hex_str) > 64:
            raise ValueError(f"expected at most 64 hex chars, got {len(hex_str)}")
        int(hex_str or "0", 16)
        return "0x" + hex_str.lower().zfill(64)
    raise ValueError(f"unsupported signature component {value!r}")


class EVMECDSASignature(BaseSignature):
    """
    ECDSA signature (v, r, s) over an ERC-3009 EIP-712 digest.

    ``v`` uses the legacy Ethereum parity encoding (27 or 28), which is what
    the token contract expects as its ``uint8 v`` argument.  ``r`` and ``s``
    are normalized to 0x-prefixed 64-character hex strings.

    Attributes:
        signature_type: Always ``"ERC3009"``.
        v: Recovery byte (27 or 28).
        r: r component (32 bytes hex).
        s: s component (32 bytes hex).

    Example::

        sig = EVMECDSASignature(v=27, r="0x" + "a" * 64, s="0x" + "b" * 64)
        raw = sig.to_bytes()   # 65 bytes: r || s || v
    """

    signature_type: Literal["ERC3009"] = Field(default="ERC3009", description="Signing standard")
    v: int = Field(..., ge=27, le=28, description="ECDSA recovery byte (27 or 28)")
    r: str = Field(..., description="Signature r component (32 bytes, 0x-prefixed hex)")
    s: str = Field(..., description="Signature s component (32 bytes, 0x-prefixed hex)")

    @field_validator("r", "s", mode="before")
    @classmethod
    def _normalize_component(cls, v: Any) -> str:
        return _to_word_hex(v)

    @classmethod
    def from_parity(cls, y_parity: bool, r: Union[int, bytes, str], s: Union[int, bytes, str]) -> "EVMECDSASignature":
        """Build a signature from a boolean y-parity (``False -> 27``, ``True -> 28``)."""
        return cls(v=28 if y_parity else 27, r=r, s=s)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "EVMECDSASignature":
        """
        Parse a 65-byte ``r || s || v`` signature.

        A trailing raw recovery id (0 or 1) is mapped to 27/28.

        Raises:
            ValueError: If ``raw`` is not 65 bytes or ``v`` is out of range.
        """
        raw = bytes(raw)
        if len(raw) != SIGNATURE_LENGTH:
            raise ValueError(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")
        v = raw[64]
        if v in (0, 1):
            v += 27
        return cls(v=v, r=raw[:32], s=raw[32:64])

    @property
    def y_parity(self) -> bool:
        return self.v == 28

    def validate_format(self) -> bool:
        """
        Validate v/r/s components.

        Returns:
            True when all components pass.

        Raises:
            ValueError: Descriptive message on the first failed check.
        """
        if self.v not in (27, 28):
            raise ValueError(f"Invalid recovery ID: {self.v}. Must be 27 or 28")
        for name, val in [("r", self.r), ("s", self.s)]:
            if len(val) != 66:
                raise ValueError(f"Invalid {name}: expected 64 hex chars, got {len(val) - 2}")
        return True

    def vrs(self) -> Tuple[int, int, int]:
        """Return ``(v, r, s)`` as integers."""
        return self.v, int(self.r, 16), int(self.s, 16)

    def to_bytes(self) -> bytes:
        """Encode as the 65-byte ``r || s || v`` form."""
        self.validate_format()
        return bytes.fromhex(self.r[2:]) + bytes.fromhex(self.s[2:]) + bytes([self.v])

    def to_packed_hex(self) -> str:
        """Encode as a 0x-prefixed 132-character hex string (``r || s || v``)."""
        return "0x" + self.to_bytes().hex()
