from .adapter import EVMAuthorizationAdapter
from .constants import (
    TRANSFER_WITH_AUTHORIZATION_TYPEHASH,
    RECEIVE_WITH_AUTHORIZATION_TYPEHASH,
    CANCEL_AUTHORIZATION_TYPEHASH,
    MAX_UINT64,
    MAX_UINT256,
)
from .standards import (
    AuthorizationKind,
    AuthorizationTypedData,
    EIP712Domain,
)
from .schemas import (
    AuthorizationParams,
    CancelAuthorizationParams,
    EVMECDSASignature,
    TransferAuthorizationParams,
)
from .digests import (
    authorization_digest,
    compute_domain_separator,
    compute_eip712_digest,
    hash_cancel_authorization,
    hash_receive_with_authorization,
    hash_transfer_with_authorization,
    struct_hash,
)
from .nonces import create_time_bounds, generate_nonce
from .signers import DigestSigner, LocalAccountSigner, SyncDigestSigner
from .signatures import (
    sign_authorization,
    sign_authorization_sync,
    sign_cancel_authorization,
    sign_cancel_authorization_sync,
    sign_receive_authorization,
    sign_receive_authorization_sync,
    sign_transfer_authorization,
    sign_transfer_authorization_sync,
)
from .verifies import (
    check_time_window,
    recover_authorizer,
    verify_authorization_signature,
)

__all__ = [
    "EVMAuthorizationAdapter",
    "TRANSFER_WITH_AUTHORIZATION_TYPEHASH",
    "RECEIVE_WITH_AUTHORIZATION_TYPEHASH",
    "CANCEL_AUTHORIZATION_TYPEHASH",
    "MAX_UINT64",
    "MAX_UINT256",
    "AuthorizationKind",
    "AuthorizationTypedData",
    "EIP712Domain",
    "AuthorizationParams",
    "CancelAuthorizationParams",
    "EVMECDSASignature",
    "TransferAuthorizationParams",
    "authorization_digest",
    "compute_domain_separator",
    "compute_eip712_digest",
    "hash_cancel_authorization",
    "hash_receive_with_authorization",
    "hash_transfer_with_authorization",
    "struct_hash",
    "create_time_bounds",
    "generate_nonce",
    "DigestSigner",
    "LocalAccountSigner",
    "SyncDigestSigner",
    "sign_authorization",
    "sign_authorization_sync",
    "sign_cancel_authorization",
    "sign_cancel_authorization_sync",
    "sign_receive_authorization",
    "sign_receive_authorization_sync",
    "sign_transfer_authorization",
    "sign_transfer_authorization_sync",
    "check_time_window",
    "recover_authorizer",
    "verify_authorization_signature",
]
