from .bases import AuthorizationAdapter
from .evm import (
    EVMAuthorizationAdapter,
    AuthorizationKind,
    TransferAuthorizationParams,
    CancelAuthorizationParams,
    EVMECDSASignature,
    LocalAccountSigner,
    generate_nonce,
    create_time_bounds,
)

__all__ = [
    "AuthorizationAdapter",
    "EVMAuthorizationAdapter",
    "AuthorizationKind",
    "TransferAuthorizationParams",
    "CancelAuthorizationParams",
    "EVMECDSASignature",
    "LocalAccountSigner",
    "generate_nonce",
    "create_time_bounds",
]
