from .bases import (
    CanonicalModel,
    BaseSignature,
    BaseAuthorization,
)

__all__ = [
    "CanonicalModel",
    "BaseSignature",
    "BaseAuthorization",
]
