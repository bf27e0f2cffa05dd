"""
EVM Authorization Adapter Test Suite

Tests for EVMAuthorizationAdapter against a scripted AsyncWeb3 mock:
- Initialization and configuration
- Domain separator lookup with the domainSeparator() fallback
- authorizationState and type-hash queries
- Submission of transfer / receive / cancel authorizations
- Error mapping for RPC failures and on-chain rejections

Usage:
    pytest tests/test_adapter/test_evm_adapter.py -v
"""

import os
from unittest.mock import patch

import pytest
from web3.exceptions import ContractLogicError

from test_mocks import (
    MOCK_CHAIN_ID_SEPOLIA,
    MOCK_DOMAIN_SEPARATOR,
    MOCK_NONCE,
    MOCK_PAYER_ADDRESS,
    MOCK_RELAYER_ADDRESS,
    MOCK_RELAYER_PRIVATE_KEY,
    MOCK_RPC_URL,
    MOCK_TX_HASH,
    MOCK_USDC_SEPOLIA,
    MockContractFunction,
    MockWeb3Provider,
    create_cancel_params,
    create_payer_signer,
    create_transfer_params,
)

from erc3009_auth.adapters.bases import AuthorizationAdapter
from erc3009_auth.adapters.evm.adapter import EVMAuthorizationAdapter
from erc3009_auth.adapters.evm.signatures import (
    sign_cancel_authorization_sync,
    sign_receive_authorization_sync,
    sign_transfer_authorization_sync,
)
from erc3009_auth.adapters.evm.standards import AuthorizationKind
from erc3009_auth.engine.exceptions import (
    BlockchainInteractionError,
    ConfigurationError,
    SignerUnavailableError,
    TransactionExecutionError,
)


# ========================================================================
# Test Fixtures
# ========================================================================

@pytest.fixture
def evm_adapter():
    """Provide an adapter with the relayer key and a local RPC URL."""
    return EVMAuthorizationAdapter(private_key=MOCK_RELAYER_PRIVATE_KEY, rpc_url=MOCK_RPC_URL)


@pytest.fixture
def transfer_params():
    return create_transfer_params(from_address=MOCK_PAYER_ADDRESS, to_address=MOCK_RELAYER_ADDRESS)


@pytest.fixture
def cancel_params():
    return create_cancel_params(authorizer=MOCK_PAYER_ADDRESS)


def _submission_functions():
    return {
        "transferWithAuthorization": MockContractFunction(),
        "receiveWithAuthorization": MockContractFunction(),
        "cancelAuthorization": MockContractFunction(),
    }


# ========================================================================
# Test Classes
# ========================================================================

class TestAdapterInitialization:
    def test_is_authorization_adapter(self, evm_adapter):
        assert isinstance(evm_adapter, AuthorizationAdapter)

    def test_init_with_private_key(self, evm_adapter):
        assert evm_adapter.wallet_address == MOCK_RELAYER_ADDRESS
        assert evm_adapter.get_wallet_address() == MOCK_RELAYER_ADDRESS

    def test_init_from_env(self):
        env = {
            "evm_private_key": MOCK_RELAYER_PRIVATE_KEY,
            "evm_rpc_url": MOCK_RPC_URL,
            "evm_request_timeout": "5",
        }
        with patch.dict(os.environ, env):
            adapter = EVMAuthorizationAdapter()
        assert adapter.wallet_address == MOCK_RELAYER_ADDRESS
        assert adapter._rpc_url == MOCK_RPC_URL
        assert adapter._request_timeout == 5

    def test_init_without_private_key_raises(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("evm_private_key", None)
            with pytest.raises(SignerUnavailableError, match="Private key not provided"):
                EVMAuthorizationAdapter(private_key=None, rpc_url=MOCK_RPC_URL)

    def test_init_without_rpc_url_raises(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("evm_rpc_url", None)
            with pytest.raises(ConfigurationError, match="RPC URL not provided"):
                EVMAuthorizationAdapter(private_key=MOCK_RELAYER_PRIVATE_KEY)

    def test_web3_instance_is_reused(self, evm_adapter):
        assert evm_adapter._get_web3_instance() is evm_adapter._get_web3_instance()


class TestDomainSeparator:
    @pytest.mark.asyncio
    async def test_domain_separator(self, evm_adapter):
        mock_web3 = MockWeb3Provider(functions={
            "DOMAIN_SEPARATOR": MockContractFunction(result=MOCK_DOMAIN_SEPARATOR),
        })
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            separator = await evm_adapter.get_domain_separator(MOCK_USDC_SEPOLIA)
        assert separator == MOCK_DOMAIN_SEPARATOR

    @pytest.mark.asyncio
    async def test_domain_separator_fallback(self, evm_adapter):
        mock_web3 = MockWeb3Provider(functions={
            "DOMAIN_SEPARATOR": MockContractFunction(error=ContractLogicError("execution reverted")),
            "domainSeparator": MockContractFunction(result=MOCK_DOMAIN_SEPARATOR),
        })
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            separator = await evm_adapter.get_domain_separator(MOCK_USDC_SEPOLIA)
        assert separator == MOCK_DOMAIN_SEPARATOR

    @pytest.mark.asyncio
    async def test_domain_separator_unavailable(self, evm_adapter):
        mock_web3 = MockWeb3Provider(functions={
            "DOMAIN_SEPARATOR": MockContractFunction(error=ContractLogicError("execution reverted")),
            "domainSeparator": MockContractFunction(error=ConnectionError("connection refused")),
        })
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            with pytest.raises(BlockchainInteractionError) as exc_info:
                await evm_adapter.get_domain_separator(MOCK_USDC_SEPOLIA)
        assert exc_info.value.rpc_method == "DOMAIN_SEPARATOR"


class TestAuthorizationState:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("used", [True, False])
    async def test_state(self, evm_adapter, used):
        state_fn = MockContractFunction(result=used)
        mock_web3 = MockWeb3Provider(functions={"authorizationState": state_fn})
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            state = await evm_adapter.get_authorization_state(
                MOCK_USDC_SEPOLIA, MOCK_PAYER_ADDRESS, "0x" + MOCK_NONCE.hex()
            )
        assert state is used
        assert state_fn.args == (MOCK_PAYER_ADDRESS, MOCK_NONCE)

    @pytest.mark.asyncio
    async def test_state_rpc_failure(self, evm_adapter):
        mock_web3 = MockWeb3Provider(functions={
            "authorizationState": MockContractFunction(error=TimeoutError("timed out")),
        })
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            with pytest.raises(BlockchainInteractionError):
                await evm_adapter.get_authorization_state(MOCK_USDC_SEPOLIA, MOCK_PAYER_ADDRESS, MOCK_NONCE)


class TestTypeHashes:
    @pytest.mark.asyncio
    async def test_type_hashes_match(self, evm_adapter):
        mock_web3 = MockWeb3Provider(functions={
            kind.type_hash_getter: MockContractFunction(result=kind.type_hash)
            for kind in AuthorizationKind
        })
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            assert await evm_adapter.get_type_hash(MOCK_USDC_SEPOLIA, AuthorizationKind.CANCEL) == (
                AuthorizationKind.CANCEL.type_hash
            )
            results = await evm_adapter.verify_type_hashes(MOCK_USDC_SEPOLIA)
        assert results == {kind: True for kind in AuthorizationKind}

    @pytest.mark.asyncio
    async def test_type_hash_mismatch(self, evm_adapter):
        functions = {
            kind.type_hash_getter: MockContractFunction(result=kind.type_hash)
            for kind in AuthorizationKind
        }
        functions["RECEIVE_WITH_AUTHORIZATION_TYPEHASH"] = MockContractFunction(result=b"\x00" * 32)
        mock_web3 = MockWeb3Provider(functions=functions)
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            results = await evm_adapter.verify_type_hashes(MOCK_USDC_SEPOLIA)
        assert results[AuthorizationKind.RECEIVE] is False
        assert results[AuthorizationKind.TRANSFER] is True

    @pytest.mark.asyncio
    async def test_type_hash_missing_getter(self, evm_adapter):
        mock_web3 = MockWeb3Provider(functions={})
        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            with pytest.raises(BlockchainInteractionError):
                await evm_adapter.get_type_hash(MOCK_USDC_SEPOLIA, AuthorizationKind.TRANSFER)


class TestSubmission:
    @pytest.mark.asyncio
    async def test_transfer_with_authorization(self, evm_adapter, transfer_params):
        signature = sign_transfer_authorization_sync(transfer_params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        functions = _submission_functions()
        mock_web3 = MockWeb3Provider(functions=functions, tx_count=7)

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            tx_hash, receipt = await evm_adapter.transfer_with_authorization(
                MOCK_USDC_SEPOLIA, transfer_params, signature
            )

        assert tx_hash == MOCK_TX_HASH
        assert receipt is None
        raw = signature.to_bytes()
        assert functions["transferWithAuthorization"].args == (
            transfer_params.from_address,
            transfer_params.to_address,
            transfer_params.value,
            transfer_params.valid_after,
            transfer_params.valid_before,
            transfer_params.nonce,
            signature.v,
            raw[:32],
            raw[32:64],
        )
        assert functions["transferWithAuthorization"].tx_params == {
            "chainId": MOCK_CHAIN_ID_SEPOLIA,
            "from": MOCK_RELAYER_ADDRESS,
            "nonce": 7,
        }
        mock_web3.eth.send_raw_transaction.assert_awaited_once()
        mock_web3.eth.wait_for_transaction_receipt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transfer_wait_for_receipt(self, evm_adapter, transfer_params):
        signature = sign_transfer_authorization_sync(transfer_params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        mock_web3 = MockWeb3Provider(functions=_submission_functions())

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            tx_hash, receipt = await evm_adapter.transfer_with_authorization(
                MOCK_USDC_SEPOLIA, transfer_params, signature, wait=True
            )

        assert tx_hash == MOCK_TX_HASH
        assert receipt["status"] == 1

    @pytest.mark.asyncio
    async def test_reverted_receipt(self, evm_adapter, transfer_params):
        signature = sign_transfer_authorization_sync(transfer_params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        mock_web3 = MockWeb3Provider(functions=_submission_functions(), receipt_status=0)

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            with pytest.raises(TransactionExecutionError) as exc_info:
                await evm_adapter.transfer_with_authorization(
                    MOCK_USDC_SEPOLIA, transfer_params, signature, wait=True
                )
        assert exc_info.value.tx_hash == MOCK_TX_HASH

    @pytest.mark.asyncio
    async def test_contract_rejection(self, evm_adapter, transfer_params):
        signature = sign_transfer_authorization_sync(transfer_params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        functions = _submission_functions()
        functions["transferWithAuthorization"] = MockContractFunction(
            error=ContractLogicError("FiatTokenV2: authorization is used or canceled")
        )
        mock_web3 = MockWeb3Provider(functions=functions)

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            with pytest.raises(TransactionExecutionError, match="authorization is used or canceled"):
                await evm_adapter.transfer_with_authorization(MOCK_USDC_SEPOLIA, transfer_params, signature)
        mock_web3.eth.send_raw_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_broadcast_failure(self, evm_adapter, transfer_params):
        signature = sign_transfer_authorization_sync(transfer_params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        mock_web3 = MockWeb3Provider(functions=_submission_functions())
        mock_web3.eth.send_raw_transaction.side_effect = ConnectionError("connection refused")

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            with pytest.raises(BlockchainInteractionError) as exc_info:
                await evm_adapter.transfer_with_authorization(MOCK_USDC_SEPOLIA, transfer_params, signature)
        assert not isinstance(exc_info.value, TransactionExecutionError)
        assert exc_info.value.rpc_method == "transferWithAuthorization"

    @pytest.mark.asyncio
    async def test_receive_with_authorization(self, evm_adapter, transfer_params):
        signature = sign_receive_authorization_sync(transfer_params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        functions = _submission_functions()
        mock_web3 = MockWeb3Provider(functions=functions)

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            tx_hash, _ = await evm_adapter.receive_with_authorization(
                MOCK_USDC_SEPOLIA, transfer_params, signature
            )

        assert tx_hash == MOCK_TX_HASH
        assert functions["receiveWithAuthorization"].args[:2] == (MOCK_PAYER_ADDRESS, MOCK_RELAYER_ADDRESS)

    @pytest.mark.asyncio
    async def test_receive_requires_payee_wallet(self, evm_adapter):
        params = create_transfer_params(from_address=MOCK_PAYER_ADDRESS)
        signature = sign_receive_authorization_sync(params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        mock_web3 = MockWeb3Provider(functions=_submission_functions())

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            with pytest.raises(ValueError, match="must be sent by the payee"):
                await evm_adapter.receive_with_authorization(MOCK_USDC_SEPOLIA, params, signature)
        mock_web3.eth.send_raw_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancel_authorization(self, evm_adapter, cancel_params):
        signature = sign_cancel_authorization_sync(cancel_params, MOCK_DOMAIN_SEPARATOR, create_payer_signer())
        functions = _submission_functions()
        mock_web3 = MockWeb3Provider(functions=functions)

        with patch.object(evm_adapter, "_get_web3_instance", return_value=mock_web3):
            tx_hash, receipt = await evm_adapter.cancel_authorization(
                MOCK_USDC_SEPOLIA, cancel_params, signature, wait=True
            )

        assert tx_hash == MOCK_TX_HASH
        assert receipt["status"] == 1
        args = functions["cancelAuthorization"].args
        assert args[:2] == (MOCK_PAYER_ADDRESS, MOCK_NONCE)
        assert args[2] == signature.v
