"""
Abstract Base Class for the Contract Adapter Boundary

Defines the interface between the off-chain authorization core and an
ERC-3009 token contract.  The core never performs network I/O itself; it
consumes these operations to obtain the domain separator it signs under
and to hand finished authorizations to the chain.

Core Classes:
    - AuthorizationAdapter: domain separator / authorization state queries
      and submission of signed authorizations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple, Union

from ..schemas.bases import BaseAuthorization, BaseSignature

SubmissionResult = Tuple[str, Optional[Any]]


class AuthorizationAdapter(ABC):
    """
    Abstract contract adapter for ERC-3009 tokens.

    Key Responsibilities:
    1. get_domain_separator: return the exact on-chain EIP-712 domain separator
    2. get_authorization_state: report whether ``(authorizer, nonce)`` was used or canceled
    3. transfer_with_authorization / receive_with_authorization /
       cancel_authorization: submit a signed authorization

    Submission methods return ``(tx_hash_hex, receipt)``; ``receipt`` is
    ``None`` unless ``wait=True``.  On-chain rejections are raised to the
    caller unchanged in meaning and are never retried.

    Example Implementation:
        class EVMAuthorizationAdapter(AuthorizationAdapter):
            # web3.py implementation
            pass
    """

    @abstractmethod
    async def get_domain_separator(self, token: str) -> bytes:
        """
        Return the token contract's current 32-byte ``DOMAIN_SEPARATOR``.

        Digests built on a stale or wrong separator will not verify on-chain.
        """
        pass

    @abstractmethod
    async def get_authorization_state(
        self,
        token: str,
        authorizer: str,
        nonce: Union[str, bytes],
    ) -> bool:
        """
        Return ``True`` if ``(authorizer, nonce)`` is already used or canceled.
        """
        pass

    @abstractmethod
    async def transfer_with_authorization(
        self,
        token: str,
        params: BaseAuthorization,
        signature: BaseSignature,
        wait: bool = False,
    ) -> SubmissionResult:
        """Submit ``transferWithAuthorization``; any account may be the sender."""
        pass

    @abstractmethod
    async def receive_with_authorization(
        self,
        token: str,
        params: BaseAuthorization,
        signature: BaseSignature,
        wait: bool = False,
    ) -> SubmissionResult:
        """Submit ``receiveWithAuthorization``; the sender must be ``params.to_address``."""
        pass

    @abstractmethod
    async def cancel_authorization(
        self,
        token: str,
        params: BaseAuthorization,
        signature: BaseSignature,
        wait: bool = False,
    ) -> SubmissionResult:
        """Submit ``cancelAuthorization`` for ``(params.authorizer, params.nonce)``."""
        pass
