"""
Digest Signer Interfaces

A signer is anything that can produce a secp256k1 ECDSA signature over a
raw 32-byte digest.  Two interfaces are defined:

DigestSigner
    Asynchronous ``sign_digest``.  Implement this for remote, HSM or
    hardware-wallet signers that need a round trip.

SyncDigestSigner
    Adds a blocking ``sign_digest_sync``.  Only signers whose key lives in
    process memory should implement it.

``LocalAccountSigner`` implements both on top of an ``eth_account``
``LocalAccount``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ...engine.exceptions import SignerUnavailableError
from .constants import BYTES32_LENGTH, get_private_key_from_env
from .schemas import EVMECDSASignature

logger = logging.getLogger(__name__)


class DigestSigner(ABC):
    """
    Abstract signer producing ECDSA signatures over 32-byte digests.

    Implementations must sign the digest exactly as given: no EIP-191
    prefix and no re-hashing.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksum address of the signing key."""

    @abstractmethod
    async def sign_digest(self, digest: bytes) -> EVMECDSASignature:
        """
        Sign a raw 32-byte digest.

        Args:
            digest: The EIP-712 digest to sign.

        Returns:
            EVMECDSASignature with ``v`` in {27, 28}.
        """


class SyncDigestSigner(DigestSigner):
    """Signer that can also sign without suspending (in-memory keys)."""

    @abstractmethod
    def sign_digest_sync(self, digest: bytes) -> EVMECDSASignature:
        """Blocking variant of :meth:`sign_digest`."""

    async def sign_digest(self, digest: bytes) -> EVMECDSASignature:
        return self.sign_digest_sync(digest)


class LocalAccountSigner(SyncDigestSigner):
    """
    Signer backed by a private key held in process memory.

    Example::

        signer = LocalAccountSigner.from_key("0x...")
        sig = signer.sign_digest_sync(digest)

        # or, with evm_private_key set in the environment / .env file
        signer = LocalAccountSigner.from_env()
    """

    def __init__(self, account: LocalAccount):
        self._account = account

    @classmethod
    def from_key(cls, private_key: Union[str, bytes]) -> "LocalAccountSigner":
        return cls(Account.from_key(private_key))

    @classmethod
    def from_env(cls, private_key: Optional[str] = None) -> "LocalAccountSigner":
        """
        Build a signer from ``private_key`` or the ``evm_private_key`` env var.

        Raises:
            SignerUnavailableError: If no key is configured.
        """
        resolved = private_key or get_private_key_from_env()
        if not resolved:
            raise SignerUnavailableError(
                "Private key not provided. Either pass 'private_key' parameter or "
                "set 'evm_private_key' environment variable."
            )
        return cls.from_key(resolved)

    @classmethod
    def random(cls) -> "LocalAccountSigner":
        """Create a signer with a freshly generated key (tests, examples)."""
        return cls(Account.create())

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def account(self) -> LocalAccount:
        return self._account

    def sign_digest_sync(self, digest: bytes) -> EVMECDSASignature:
        if len(digest) != BYTES32_LENGTH:
            raise ValueError(f"digest must be {BYTES32_LENGTH} bytes, got {len(digest)}")
        signed = self._account.unsafe_sign_hash(digest)
        return EVMECDSASignature(v=signed.v, r=signed.r, s=signed.s)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r})"
