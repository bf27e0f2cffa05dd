from .exceptions import (
    BaseException,
    AuthorizationSigningError,
    SignerUnavailableError,
    ConfigurationError,
    BlockchainInteractionError,
    TransactionExecutionError,
)

__all__ = [
    "BaseException",
    "AuthorizationSigningError",
    "SignerUnavailableError",
    "ConfigurationError",
    "BlockchainInteractionError",
    "TransactionExecutionError",
]
