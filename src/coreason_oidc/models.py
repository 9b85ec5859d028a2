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
Data models for the coreason-oidc package.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

OPENID_SCOPE = "openid"


class PKCEMethod(StrEnum):
    S256 = "S256"
    PLAIN = "plain"


class OAuth2Endpoint(BaseModel):
    """
    Authorization server endpoints taken verbatim from the discovery document.

    Attributes:
        auth_url (str): The authorization endpoint.
        token_url (str): The token endpoint.
        device_auth_url (str | None): The device authorization endpoint (RFC 8628), if advertised.
    """

    model_config = ConfigDict(frozen=True)

    auth_url: str
    token_url: str
    device_auth_url: str | None = None


class OAuth2Config(BaseModel):
    """
    OAuth 2.0 client configuration used by the authorization code and device flows.

    This model is frozen (immutable). `scopes` always ends with exactly one `openid` entry.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: SecretStr = Field(
        default=SecretStr(""), description="Empty for public clients. Protected from logging."
    )
    endpoint: OAuth2Endpoint
    scopes: tuple[str, ...] = (OPENID_SCOPE,)

    @field_validator("scopes")
    @classmethod
    def ensure_single_openid(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Moves `openid` to the end and removes duplicates of it."""
        return tuple(scope for scope in v if scope != OPENID_SCOPE) + (OPENID_SCOPE,)

    @property
    def scope(self) -> str:
        """The space-delimited scope parameter (RFC 6749 Section 3.3)."""
        return " ".join(self.scopes)
