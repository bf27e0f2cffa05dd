"""
ERC-3009 Smart Contract ABI Module

Minimal ABI fragments for the parts of an ERC-3009 token (USDC, EURC, ...)
the authorization adapter talks to.

Usage:
    from .ERC20_ABI import (
        get_domain_separator_abi,
        get_authorization_state_abi,
        get_erc3009_abi,
        get_type_hash_abi,
    )

    contract = web3.eth.contract(address=token_address, abi=get_erc3009_abi())
"""

from typing import Dict, Any, List


def _view_bytes32(name: str) -> Dict[str, Any]:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bytes32"}],
    }


def get_domain_separator_abi(fallback: bool = False) -> List[Dict[str, Any]]:
    """
    Get ABI for the EIP-712 domain separator getter.

    Most tokens expose ``DOMAIN_SEPARATOR()``; some expose ``domainSeparator()``
    instead.

    Args:
        fallback: Return the ``domainSeparator()`` variant.

    Example:
        contract = web3.eth.contract(address=token_address, abi=get_domain_separator_abi())
        separator = await contract.functions.DOMAIN_SEPARATOR().call()
    """
    return [_view_bytes32("domainSeparator" if fallback else "DOMAIN_SEPARATOR")]


def get_authorization_state_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ``authorizationState(authorizer, nonce)``.

    Returns ``true`` once the nonce has been used or canceled.
    """
    return [
        {
            "name": "authorizationState",
            "type": "function",
            "stateMutability": "view",
            "inputs": [
                {"name": "authorizer", "type": "address"},
                {"name": "nonce",      "type": "bytes32"},
            ],
            "outputs": [{"name": "", "type": "bool"}],
        }
    ]


def get_type_hash_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for the three public type-hash constants.

    Used to check locally compiled type hashes against a deployed token.
    """
    return [
        _view_bytes32("TRANSFER_WITH_AUTHORIZATION_TYPEHASH"),
        _view_bytes32("RECEIVE_WITH_AUTHORIZATION_TYPEHASH"),
        _view_bytes32("CANCEL_AUTHORIZATION_TYPEHASH"),
    ]


def get_erc3009_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for the ERC-3009 state-changing functions.

    ``transferWithAuthorization`` and ``receiveWithAuthorization`` take
    ``(from, to, value, validAfter, validBefore, nonce, v, r, s)``;
    ``cancelAuthorization`` takes ``(authorizer, nonce, v, r, s)``.

    Example::

        abi = get_erc3009_abi()
        contract = web3.eth.contract(address=token_address, abi=abi)
        tx = contract.functions.transferWithAuthorization(
            from_addr, to_addr, value,
            valid_after, valid_before, nonce_bytes32,
            v, r_bytes32, s_bytes32,
        ).build_transaction({...})
    """
    signature_inputs = [
        {"name": "v", "type": "uint8"},
        {"name": "r", "type": "bytes32"},
        {"name": "s", "type": "bytes32"},
    ]
    transfer_inputs = [
        {"name": "from",        "type": "address"},
        {"name": "to",          "type": "address"},
        {"name": "value",       "type": "uint256"},
        {"name": "validAfter",  "type": "uint256"},
        {"name": "validBefore", "type": "uint256"},
        {"name": "nonce",       "type": "bytes32"},
    ]
    return [
        {
            "name": "transferWithAuthorization",
            "type": "function",
            "stateMutability": "nonpayable",
            "inputs": transfer_inputs + signature_inputs,
            "outputs": [],
        },
        {
            "name": "receiveWithAuthorization",
            "type": "function",
            "stateMutability": "nonpayable",
            "inputs": transfer_inputs + signature_inputs,
            "outputs": [],
        },
        {
            "name": "cancelAuthorization",
            "type": "function",
            "stateMutability": "nonpayable",
            "inputs": [
                {"name": "authorizer", "type": "address"},
                {"name": "nonce",      "type": "bytes32"},
            ] + signature_inputs,
            "outputs": [],
        },
    ]
