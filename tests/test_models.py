# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_oidc

from typing import Any

import pytest
from conftest import discovery_document
from pydantic import SecretStr, ValidationError

from coreason_oidc.models import OAuth2Config, OAuth2Endpoint, PKCEMethod
from coreason_oidc.models_internal import PKCEDiscoveryClaims, ProviderMetadata

ENDPOINT = OAuth2Endpoint(auth_url="https://idp/authorize", token_url="https://idp/token")


def test_oauth2_config_scope_order() -> None:
    config = OAuth2Config(client_id="cli", endpoint=ENDPOINT, scopes=("groups", "email", "openid"))
    assert config.scopes == ("groups", "email", "openid")
    assert config.scope == "groups email openid"


def test_oauth2_config_single_openid() -> None:
    config = OAuth2Config(client_id="cli", endpoint=ENDPOINT, scopes=("openid", "email", "openid"))
    assert config.scopes == ("email", "openid")


def test_oauth2_config_default_scope() -> None:
    config = OAuth2Config(client_id="cli", endpoint=ENDPOINT)
    assert config.scopes == ("openid",)


def test_oauth2_config_is_frozen() -> None:
    config = OAuth2Config(client_id="cli", client_secret=SecretStr("s"), endpoint=ENDPOINT)
    with pytest.raises(ValidationError):
        config.client_id = "other"  # type: ignore[misc]
    assert str(config.client_secret) == "**********"


def test_pkce_method_values() -> None:
    assert PKCEMethod.S256 == "S256"
    assert PKCEMethod.PLAIN == "plain"


def test_provider_metadata_keeps_raw_claims() -> None:
    document = discovery_document(code_challenge_methods_supported=["S256"], custom_claim={"a": 1})
    metadata = ProviderMetadata.from_document(document)
    assert metadata.issuer == "https://idp.example.com"
    assert metadata.device_authorization_endpoint == "https://idp.example.com/device/code"
    assert metadata.raw_claims == document
    assert metadata.raw_claims is not document


def test_provider_metadata_requires_endpoints() -> None:
    document = discovery_document()
    del document["token_endpoint"]
    with pytest.raises(ValidationError):
        ProviderMetadata.from_document(document)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (["S256", "plain"], ["S256", "plain"]),
        (["plain", "S256"], ["plain", "S256"]),
        ([], []),
        (None, []),
    ],
)
def test_pkce_claims_valid(value: Any, expected: list[str]) -> None:
    claims = PKCEDiscoveryClaims.model_validate({"code_challenge_methods_supported": value})
    assert claims.code_challenge_methods_supported == expected


def test_pkce_claims_absent() -> None:
    assert PKCEDiscoveryClaims.model_validate({}).code_challenge_methods_supported == []


@pytest.mark.parametrize("value", ["S256", 256, {"S256": True}, ["S256", 1], [None]])
def test_pkce_claims_malformed(value: Any) -> None:
    with pytest.raises(ValidationError):
        PKCEDiscoveryClaims.model_validate({"code_challenge_methods_supported": value})
