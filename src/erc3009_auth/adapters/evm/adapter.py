"""
EVM ERC-3009 Contract Adapter

Bridges the off-chain authorization core and a deployed ERC-3009 token.
Handles domain separator discovery, nonce state queries and relaying of
signed authorizations.

Key Features:
    - DOMAIN_SEPARATOR() / domainSeparator() lookup
    - authorizationState(authorizer, nonce) queries
    - Type-hash constant checks against the local definitions
    - transferWithAuthorization / receiveWithAuthorization / cancelAuthorization submission

Dependencies:
    - web3.py: For blockchain RPC interaction
    - eth_account: For relayer transaction signing
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from eth_account import Account
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError
from web3.types import TxReceipt

from ..bases import AuthorizationAdapter
from .ERC20_ABI import (
    get_authorization_state_abi,
    get_domain_separator_abi,
    get_erc3009_abi,
    get_type_hash_abi,
)
from .constants import (
    get_private_key_from_env,
    get_request_timeout_from_env,
    get_rpc_url_from_env,
)
from .schemas import (
    CancelAuthorizationParams,
    EVMECDSASignature,
    TransferAuthorizationParams,
    normalize_address,
    normalize_bytes32,
)
from .standards import AuthorizationKind
from ...engine.exceptions import (
    BlockchainInteractionError,
    ConfigurationError,
    SignerUnavailableError,
    TransactionExecutionError,
)

logger = logging.getLogger(__name__)


class EVMAuthorizationAdapter(AuthorizationAdapter):
    """
    ERC-3009 contract adapter on top of ``web3.AsyncWeb3``.

    Reads the token's domain separator, nonce state and type-hash constants,
    and relays signed authorizations.  The adapter holds its own relayer key,
    used only to pay gas for the submission transaction; the authorization
    itself is signed by the token holder beforehand.

    Gas and fee fields are filled in by web3's defaults.  Failed calls are
    never retried.

    Attributes:
        account: Relayer account (initialized from ``evm_private_key``)
        wallet_address: Checksum-formatted relayer address

    Environment Variables:
        - evm_private_key: Relayer private key (required unless passed in)
        - evm_rpc_url: JSON-RPC endpoint (required unless passed in)
        - evm_request_timeout: RPC request timeout in seconds (default 60)

    Example:
        adapter = EVMAuthorizationAdapter(rpc_url="https://sepolia.example")
        separator = await adapter.get_domain_separator(usdc_address)
        signature = await sign_receive_authorization(params, separator, payer)
        tx_hash, receipt = await adapter.receive_with_authorization(
            usdc_address, params, signature, wait=True
        )
    """

    def __init__(
        self,
        private_key: Optional[str] = None,
        rpc_url: Optional[str] = None,
        request_timeout: Optional[int] = None,
    ):
        """
        Initialize the adapter.

        Explicit arguments take precedence over environment variables.

        Raises:
            SignerUnavailableError: If no relayer key is configured.
            ConfigurationError: If no RPC URL is configured.
        """
        resolved_pk = private_key if private_key else get_private_key_from_env()
        if not resolved_pk:
            raise SignerUnavailableError(
                "Private key not provided. Either pass 'private_key' parameter or "
                "set 'evm_private_key' environment variable."
            )

        self._rpc_url = rpc_url or get_rpc_url_from_env()
        if not self._rpc_url:
            raise ConfigurationError(
                "RPC URL not provided. Either pass 'rpc_url' parameter or "
                "set 'evm_rpc_url' environment variable."
            )
        self._request_timeout = request_timeout if request_timeout is not None else get_request_timeout_from_env()

        self.account = Account.from_key(resolved_pk)
        self.wallet_address = AsyncWeb3.to_checksum_address(self.account.address)
        self._web3: Optional[AsyncWeb3] = None

    def _get_web3_instance(self) -> AsyncWeb3:
        """Return the (lazily created) ``AsyncWeb3`` bound to the configured RPC."""
        if self._web3 is None:
            self._web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
                self._rpc_url,
                request_kwargs={"timeout": self._request_timeout}
            ))
        return self._web3

    def get_wallet_address(self) -> str:
        return self.wallet_address

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_domain_separator(self, token: str) -> bytes:
        """
        Query the token's EIP-712 domain separator.

        Tries ``DOMAIN_SEPARATOR()`` first and ``domainSeparator()`` second.

        Raises:
            BlockchainInteractionError: If neither getter can be called.
        """
        web3 = self._get_web3_instance()
        token_address = AsyncWeb3.to_checksum_address(token)

        contract = web3.eth.contract(address=token_address, abi=get_domain_separator_abi())
        try:
            return bytes(await contract.functions.DOMAIN_SEPARATOR().call())
        except Exception as e:
            logger.debug("DOMAIN_SEPARATOR() failed on %s, trying domainSeparator(): %s", token_address, e)

        contract = web3.eth.contract(address=token_address, abi=get_domain_separator_abi(fallback=True))
        try:
            return bytes(await contract.functions.domainSeparator().call())
        except Exception as e:
            raise BlockchainInteractionError(
                f"Failed to query domain separator of {token_address}: {e}",
                rpc_method="DOMAIN_SEPARATOR",
            ) from e

    async def get_authorization_state(
        self,
        token: str,
        authorizer: str,
        nonce: Union[str, bytes],
    ) -> bool:
        web3 = self._get_web3_instance()
        token_address = AsyncWeb3.to_checksum_address(token)
        contract = web3.eth.contract(address=token_address, abi=get_authorization_state_abi())
        try:
            state = await contract.functions.authorizationState(
                normalize_address(authorizer),
                normalize_bytes32(nonce),
            ).call()
        except Exception as e:
            raise BlockchainInteractionError(
                f"Failed to query authorization state on {token_address}: {e}",
                rpc_method="authorizationState",
            ) from e
        return bool(state)

    async def get_type_hash(self, token: str, kind: AuthorizationKind) -> bytes:
        """
        Read the contract's public type-hash constant for ``kind``.
        """
        kind = AuthorizationKind(kind)
        web3 = self._get_web3_instance()
        token_address = AsyncWeb3.to_checksum_address(token)
        contract = web3.eth.contract(address=token_address, abi=get_type_hash_abi())
        try:
            getter = getattr(contract.functions, kind.type_hash_getter)
            return bytes(await getter().call())
        except Exception as e:
            raise BlockchainInteractionError(
                f"Failed to query {kind.type_hash_getter} on {token_address}: {e}",
                rpc_method=kind.type_hash_getter,
            ) from e

    async def verify_type_hashes(self, token: str) -> Dict[AuthorizationKind, bool]:
        """
        Compare the token's type-hash constants with the local ones.

        Returns:
            Mapping of each kind to whether the on-chain constant matches.
        """
        results: Dict[AuthorizationKind, bool] = {}
        for kind in AuthorizationKind:
            on_chain = await self.get_type_hash(token, kind)
            results[kind] = on_chain == kind.type_hash
            if not results[kind]:
                logger.warning(
                    "%s mismatch on %s: contract 0x%s, expected 0x%s",
                    kind.type_hash_getter, token, on_chain.hex(), kind.type_hash.hex(),
                )
        return results

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def transfer_with_authorization(
        self,
        token: str,
        params: TransferAuthorizationParams,
        signature: EVMECDSASignature,
        wait: bool = False,
    ) -> Tuple[str, Optional[TxReceipt]]:
        return await self._submit(
            token,
            AuthorizationKind.TRANSFER,
            self._transfer_args(params),
            signature,
            wait,
        )

    async def receive_with_authorization(
        self,
        token: str,
        params: TransferAuthorizationParams,
        signature: EVMECDSASignature,
        wait: bool = False,
    ) -> Tuple[str, Optional[TxReceipt]]:
        """
        Raises:
            ValueError: If the relayer wallet is not the payee; the contract
                would reject the call, so nothing is sent.
        """
        if normalize_address(params.to_address) != self.wallet_address:
            logger.warning(
                "Refusing receiveWithAuthorization: payee %s is not relayer %s",
                params.to_address, self.wallet_address,
            )
            raise ValueError(
                f"receiveWithAuthorization must be sent by the payee {params.to_address}, "
                f"adapter wallet is {self.wallet_address}"
            )
        return await self._submit(
            token,
            AuthorizationKind.RECEIVE,
            self._transfer_args(params),
            signature,
            wait,
        )

    async def cancel_authorization(
        self,
        token: str,
        params: CancelAuthorizationParams,
        signature: EVMECDSASignature,
        wait: bool = False,
    ) -> Tuple[str, Optional[TxReceipt]]:
        return await self._submit(
            token,
            AuthorizationKind.CANCEL,
            [normalize_address(params.authorizer), params.nonce],
            signature,
            wait,
        )

    @staticmethod
    def _transfer_args(params: TransferAuthorizationParams) -> List[Any]:
        return [
            normalize_address(params.from_address),
            normalize_address(params.to_address),
            params.value,
            params.valid_after,
            params.valid_before,
            params.nonce,
        ]

    async def _submit(
        self,
        token: str,
        kind: AuthorizationKind,
        args: List[Any],
        signature: EVMECDSASignature,
        wait: bool,
    ) -> Tuple[str, Optional[TxReceipt]]:
        """
        Build, sign and broadcast ``kind.contract_function(*args, v, r, s)``.

        Returns:
            A tuple of (transaction_hash_hex, transaction_receipt); the
            receipt is ``None`` unless ``wait`` is set.

        Raises:
            TransactionExecutionError: If the contract rejects the call
                (revert during gas estimation, or a mined receipt with status 0).
            BlockchainInteractionError: For any other RPC failure.
        """
        web3 = self._get_web3_instance()
        token_address = AsyncWeb3.to_checksum_address(token)
        contract = web3.eth.contract(address=token_address, abi=get_erc3009_abi())
        method = kind.contract_function

        raw_signature = signature.to_bytes()
        call_args = args + [signature.v, raw_signature[:32], raw_signature[32:64]]

        try:
            tx_fn = getattr(contract.functions, method)(*call_args)
            tx_nonce = await web3.eth.get_transaction_count(self.wallet_address)
            chain_id = await web3.eth.chain_id

            tx_dict = await tx_fn.build_transaction({
                "chainId": chain_id,
                "from": self.wallet_address,
                "nonce": tx_nonce,
            })

            signed_tx = self.account.sign_transaction(tx_dict)
            tx_hash = await web3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except ContractLogicError as e:
            raise TransactionExecutionError(
                f"{method} rejected by {token_address}: {e}",
                rpc_method=method,
            ) from e
        except Exception as e:
            raise BlockchainInteractionError(
                f"Failed to submit {method} to {token_address}: {e}",
                rpc_method=method,
            ) from e

        tx_hex = AsyncWeb3.to_hex(tx_hash)
        logger.info("Submitted %s to %s: %s", method, token_address, tx_hex)

        if not wait:
            return tx_hex, None

        try:
            receipt = await web3.eth.wait_for_transaction_receipt(tx_hash)
        except Exception as e:
            raise BlockchainInteractionError(
                f"Failed to obtain receipt for {tx_hex}: {e}",
                rpc_method="eth_getTransactionReceipt",
            ) from e

        if receipt["status"] == 0:
            raise TransactionExecutionError(
                f"Transaction failed: {tx_hex}",
                tx_hash=tx_hex,
                rpc_method=method,
            )
        return tx_hex, receipt
