"""
ERC-3009 Test Mocks Module

Provides mock data and utilities for testing the authorization core and the
EVM contract adapter without blockchain connectivity.

Key Components:
    - Fixed addresses, private keys, domain separators and nonces
    - Factories for authorization parameters and real signatures
    - Mock contract / Web3 objects with scripted RPC responses

Usage:
    from test_mocks import (
        create_transfer_params,
        create_cancel_params,
        MockWeb3Provider,
    )

    params = create_transfer_params()
    web3_mock = MockWeb3Provider(functions={"DOMAIN_SEPARATOR": MockContractFunction(result=MOCK_DOMAIN_SEPARATOR)})
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, Mock

from eth_account import Account
from web3 import AsyncWeb3

from erc3009_auth.adapters.evm.constants import MAX_UINT64
from erc3009_auth.adapters.evm.schemas import (
    CancelAuthorizationParams,
    TransferAuthorizationParams,
)
from erc3009_auth.adapters.evm.signers import LocalAccountSigner


# ========================================================================
# Mock Blockchain Constants
# ========================================================================

# Test private keys (do not use in production!)
MOCK_PAYER_PRIVATE_KEY = "0x1234567890123456789012345678901234567890123456789012345678901234"
MOCK_RELAYER_PRIVATE_KEY = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcdefabcd"

MOCK_PAYER_ADDRESS = AsyncWeb3.to_checksum_address(Account.from_key(MOCK_PAYER_PRIVATE_KEY).address)
MOCK_RELAYER_ADDRESS = AsyncWeb3.to_checksum_address(Account.from_key(MOCK_RELAYER_PRIVATE_KEY).address)

# Low addresses used by the reference digest examples
MOCK_ADDRESS_ONE = "0x" + "00" * 19 + "01"
MOCK_ADDRESS_TWO = "0x" + "00" * 19 + "02"

MOCK_USDC_SEPOLIA = AsyncWeb3.to_checksum_address("0x1c7d4b196cb0c7b01d743fbc6116a902379c7238")
MOCK_CHAIN_ID_SEPOLIA = 11155111
MOCK_RPC_URL = "http://localhost:8545"

# Domain separators
MOCK_DOMAIN_SEPARATOR = b"\x01" * 32
MOCK_OTHER_DOMAIN_SEPARATOR = b"\x02" * 32

# Nonces
MOCK_NONCE = b"\x03" * 32
MOCK_OTHER_NONCE = b"\x04" * 32

MOCK_VALUE = 1000
MOCK_TX_HASH = "0x" + "ab" * 32
MOCK_GAS_LIMIT = 100000
MOCK_GAS_PRICE = 1_000_000_000


# ========================================================================
# Parameter and Signature Factories
# ========================================================================

def create_transfer_params(
    from_address: str = MOCK_ADDRESS_ONE,
    to_address: str = MOCK_ADDRESS_TWO,
    value: int = MOCK_VALUE,
    valid_after: int = 0,
    valid_before: int = MAX_UINT64,
    nonce: bytes = MOCK_NONCE,
) -> TransferAuthorizationParams:
    """
    Create transfer / receive parameters, defaulting to the reference example
    (from 0x..01, to 0x..02, value 1000, window [0, 2**64 - 1), nonce 0x03 * 32).
    """
    return TransferAuthorizationParams(
        from_address=from_address,
        to_address=to_address,
        value=value,
        valid_after=valid_after,
        valid_before=valid_before,
        nonce=nonce,
    )


def create_cancel_params(
    authorizer: str = MOCK_ADDRESS_ONE,
    nonce: bytes = MOCK_NONCE,
) -> CancelAuthorizationParams:
    return CancelAuthorizationParams(authorizer=authorizer, nonce=nonce)


def create_payer_signer() -> LocalAccountSigner:
    return LocalAccountSigner.from_key(MOCK_PAYER_PRIVATE_KEY)


def create_relayer_signer() -> LocalAccountSigner:
    return LocalAccountSigner.from_key(MOCK_RELAYER_PRIVATE_KEY)


# ========================================================================
# Mock Web3 Provider Classes
# ========================================================================

class MockContractFunction:
    """
    Mock of a bound contract function (``contract.functions.name(*args)``).

    Attributes:
        result: Value returned from ``call()``
        error: Exception raised from ``call()`` / ``build_transaction()``
        args: Arguments of the last invocation
        tx_params: Parameters passed to the last ``build_transaction()``
    """

    def __init__(self, result: Any = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.args = None
        self.tx_params = None

    def __call__(self, *args):
        self.args = args
        return self

    async def call(self):
        if self.error is not None:
            raise self.error
        return self.result

    async def build_transaction(self, tx_params: Dict[str, Any]) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.tx_params = tx_params
        return {
            "from": tx_params.get("from"),
            "chainId": tx_params.get("chainId"),
            "nonce": tx_params.get("nonce"),
            "gas": MOCK_GAS_LIMIT,
            "gasPrice": MOCK_GAS_PRICE,
            "to": MOCK_USDC_SEPOLIA,
            "value": 0,
            "data": b"\xab" * 100,
        }


class MockFunctions:
    """``contract.functions`` namespace; unknown names raise AttributeError."""

    def __init__(self, functions: Dict[str, MockContractFunction]):
        self._functions = functions

    def __getattr__(self, name: str) -> MockContractFunction:
        try:
            return self.__dict__["_functions"][name]
        except KeyError:
            raise AttributeError(f"Contract has no function {name!r}")


class MockContract:
    def __init__(self, functions: Dict[str, MockContractFunction]):
        self.functions = MockFunctions(functions)


class MockEth:
    """
    Mock ``AsyncWeb3.eth`` namespace.

    ``chain_id`` is exposed as a property returning a fresh awaitable, the
    way ``AsyncEth.chain_id`` behaves.
    """

    def __init__(
        self,
        functions: Dict[str, MockContractFunction],
        chain_id: int,
        tx_count: int,
        receipt_status: int,
    ):
        self._chain_id = chain_id
        self.contract = Mock(side_effect=lambda address, abi: MockContract(functions))
        self.get_transaction_count = AsyncMock(return_value=tx_count)
        self.send_raw_transaction = AsyncMock(return_value=bytes.fromhex(MOCK_TX_HASH[2:]))
        self.wait_for_transaction_receipt = AsyncMock(return_value={
            "transactionHash": bytes.fromhex(MOCK_TX_HASH[2:]),
            "blockNumber": 1,
            "status": receipt_status,
            "from": MOCK_RELAYER_ADDRESS,
            "to": MOCK_USDC_SEPOLIA,
            "logs": [],
        })

    @property
    def chain_id(self):
        async def _chain_id():
            return self._chain_id
        return _chain_id()


class MockWeb3Provider:
    """
    Mock AsyncWeb3 provider for simulating the RPC calls made by the adapter.

    Args:
        functions: Contract functions available on every contract instance
        chain_id: Value of ``eth.chain_id``
        tx_count: Value of ``eth.get_transaction_count``
        receipt_status: ``status`` of the receipt returned when waiting
    """

    def __init__(
        self,
        functions: Optional[Dict[str, MockContractFunction]] = None,
        chain_id: int = MOCK_CHAIN_ID_SEPOLIA,
        tx_count: int = 0,
        receipt_status: int = 1,
    ):
        self.functions = functions if functions is not None else {}
        self.eth = MockEth(self.functions, chain_id, tx_count, receipt_status)

    @staticmethod
    def to_checksum_address(address: str) -> str:
        return AsyncWeb3.to_checksum_address(address)
