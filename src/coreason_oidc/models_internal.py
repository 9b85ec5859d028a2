# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc

"""
Internal data models for the coreason-oidc package.
These are not exposed in the public API.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

ClaimsT = TypeVar("ClaimsT", bound=BaseModel)


class ProviderMetadata(BaseModel):
    """
    OIDC Provider Metadata from .well-known/openid-configuration.

    The complete document is kept in `raw_claims` so that non-standard or optional
    fields can be read later with `claims()`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    issuer: str = Field(..., description="The OIDC issuer URL.")
    authorization_endpoint: str = Field(..., description="The authorization endpoint URL.")
    token_endpoint: str = Field(..., description="The token endpoint URL.")
    userinfo_endpoint: str | None = Field(default=None, description="The userinfo endpoint URL.")
    jwks_uri: str | None = Field(default=None, description="The URL to the JWKS.")
    device_authorization_endpoint: str | None = Field(
        default=None, description="The device authorization endpoint URL."
    )
    scopes_supported: list[str] | None = None
    raw_claims: dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "ProviderMetadata":
        """Builds the metadata from a decoded discovery document."""
        return cls.model_validate({**document, "raw_claims": dict(document)})

    def claims(self, model: type[ClaimsT]) -> ClaimsT:
        """
        Validates the raw discovery document against `model`.

        Raises:
            pydantic.ValidationError: If the document does not match the model.
        """
        return model.model_validate(self.raw_claims)


class PKCEDiscoveryClaims(BaseModel):
    """
    The PKCE capability advertised in the discovery document (RFC 8414 Section 2).

    An absent (or null) field means the provider declared no method; a present
    field of any other shape than a list of strings fails validation.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    code_challenge_methods_supported: list[str] = Field(default_factory=list)

    @field_validator("code_challenge_methods_supported", mode="before")
    @classmethod
    def null_as_absent(cls, v: Any) -> Any:
        return [] if v is None else v
