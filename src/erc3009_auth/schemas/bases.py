"""
Base Schema Models for ERC-3009 Authorizations

This module defines the base classes that the authorization parameter and
signature models inherit from. It provides a single place for pydantic
configuration and canonical serialization.

Core Classes:
    - CanonicalModel: RFC8785-style Pydantic base model with deterministic JSON output
    - BaseSignature: Abstract signature component model
    - BaseAuthorization: Abstract off-chain authorization parameter model

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Any, Dict
from abc import ABC

from pydantic import BaseModel, ConfigDict, Field


class CanonicalModel(BaseModel):
    """
    RFC8785-compliant Pydantic base model with canonical JSON serialization.

    Provides deterministic JSON (sorted keys, no whitespace) so that models
    can be logged, stored or transported without representation drift.

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        canonical_json = model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a canonical JSON string.

        ``model_dump(mode="json", by_alias=True)`` turns bytes, enums and
        nested models into plain JSON types, then ``json.dumps`` with sorted
        keys and compact separators fixes the representation.

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump()


class BaseSignature(CanonicalModel, ABC):
    """
    Abstract base class for signature components.

    Concrete signatures are immutable values: they are produced once per
    signing call and carry no timestamps, so two signatures with the same
    components compare equal.

    Attributes:
        signature_type: The signing standard that produced the signature.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    signature_type: str = Field(..., description="Signing standard (e.g. ERC3009)")

    def validate_format(self) -> bool:
        """
        Validate the signature components.

        Returns:
            bool: True if the signature format is valid.

        Raises:
            ValueError: If the signature format is invalid.
        """
        raise NotImplementedError


class BaseAuthorization(CanonicalModel, ABC):
    """
    Abstract base class for off-chain authorization parameters.

    Authorization parameters are frozen value objects compared
    field-by-field. Construction only normalizes field widths; whether an
    authorization is still usable (time window, nonce state) is decided by
    the consuming contract.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_message(self) -> Dict[str, Any]:
        """
        Return the EIP-712 ``message`` mapping for this authorization.

        Returns:
            Dict[str, Any]: Field values keyed by their EIP-712 names.
        """
        raise NotImplementedError
