"""
Exception and Error Definitions Module

Defines the exception hierarchy for authorization signing and the
contract-adapter boundary. All exceptions inherit from the project's
BaseException so callers can catch everything raised by this package in
one place while still telling "could not sign" apart from "could not reach
the network".

Exception Hierarchy:
    BaseException (root)
    ├── AuthorizationSigningError
    │   └── SignerUnavailableError
    ├── ConfigurationError
    └── BlockchainInteractionError
        └── TransactionExecutionError

Type and width errors on model construction surface as pydantic
``ValidationError`` (a ``ValueError`` subclass) and are not wrapped.
"""

from typing import Optional


class BaseException(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions inherit from this class to enable unified
    exception handling.
    """
    pass


class AuthorizationSigningError(BaseException):
    """
    Raised when the signing backend fails to produce a signature.

    This includes scenarios such as:
    - Hardware or remote signer timeout / I/O failure
    - Signer returning a malformed signature
    - Any exception raised inside a signer implementation

    The original backend exception is kept as ``__cause__``. Signing is
    never retried.
    """
    pass


class SignerUnavailableError(AuthorizationSigningError):
    """
    Raised when key material for a signer cannot be found.

    Typically occurs when neither an explicit private key nor the
    ``evm_private_key`` environment variable is provided.
    """
    pass


class ConfigurationError(BaseException):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Missing RPC URL for the contract adapter
    - Invalid timeout values in the environment
    """
    pass


class BlockchainInteractionError(BaseException):
    """
    Raised when blockchain interaction (RPC call) fails.

    This includes scenarios such as:
    - RPC call timeout
    - Network connectivity issues
    - Contract call revert on a view function

    Attributes:
        rpc_method: Contract function or RPC method that was called
    """

    def __init__(self, message: str, rpc_method: Optional[str] = None):
        super().__init__(message)
        self.rpc_method = rpc_method


class TransactionExecutionError(BlockchainInteractionError):
    """
    Raised when a submitted authorization transaction fails on-chain.

    This covers every rejection the token contract can make (expired
    window, nonce already used or canceled, wrong caller for
    ``receiveWithAuthorization``); the contract's verdict is passed upward
    without local interpretation.

    Attributes:
        tx_hash: Transaction hash if available
    """

    def __init__(self, message: str, tx_hash: Optional[str] = None, rpc_method: Optional[str] = None):
        super().__init__(message, rpc_method=rpc_method)
        self.tx_hash = tx_hash
