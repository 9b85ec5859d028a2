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
OpenID Connect Discovery 1.0 (https://openid.net/specs/openid-connect-discovery-1_0.html).
"""

import json
from typing import Any

import httpx
from pydantic import ValidationError

from coreason_oidc.exceptions import DiscoveryError, MetadataParseError
from coreason_oidc.models_internal import PKCEDiscoveryClaims, ProviderMetadata

WELL_KNOWN_PATH = "/.well-known/openid-configuration"
MAX_DOCUMENT_SIZE = 1_000_000


def discovery_url(issuer_url: str) -> str:
    return issuer_url.rstrip("/") + WELL_KNOWN_PATH


async def _fetch_document(client: httpx.AsyncClient, url: str) -> Any:
    """
    Downloads and decodes the discovery document, enforcing a size limit.

    Raises:
        DiscoveryError: On non-success status, oversized or non-JSON body.
        httpx.HTTPError: On network failure.
    """
    async with client.stream("GET", url, headers={"Accept": "application/json"}) as response:
        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_DOCUMENT_SIZE:
            raise DiscoveryError(f"Discovery document from {url} is too large ({content_length} bytes)")

        content = bytearray()
        async for chunk in response.aiter_bytes():
            content.extend(chunk)
            if len(content) > MAX_DOCUMENT_SIZE:
                raise DiscoveryError(f"Discovery document from {url} is too large")

    if not response.is_success:
        excerpt = bytes(content[:200]).decode("utf-8", errors="replace")
        raise DiscoveryError(f"{response.status_code} {response.reason_phrase} from {url}: {excerpt}")

    try:
        return json.loads(content)
    except (ValueError, RecursionError) as e:
        raise DiscoveryError(f"Invalid JSON response from OIDC discovery at {url}: {e}") from e


async def discover(client: httpx.AsyncClient, issuer_url: str) -> ProviderMetadata:
    """
    Fetches the provider metadata of `issuer_url` with the given client.

    Performs a single attempt. The `issuer` of the document must equal `issuer_url`.

    Args:
        client: The HTTP client carrying the TLS policy and instrumentation.
        issuer_url: The OIDC issuer URL.

    Returns:
        ProviderMetadata: The validated discovery document.

    Raises:
        DiscoveryError: If the document cannot be fetched or is not valid provider metadata.
    """
    url = discovery_url(issuer_url)
    try:
        document = await _fetch_document(client, url)
    except httpx.HTTPError as e:
        raise DiscoveryError(f"Failed to fetch OIDC configuration from {url}: {type(e).__name__}: {e}") from e

    if not isinstance(document, dict):
        raise DiscoveryError(f"OIDC configuration from {url} is not a JSON object")

    try:
        metadata = ProviderMetadata.from_document(document)
    except ValidationError as e:
        raise DiscoveryError(f"Invalid OIDC configuration from {url}: {e}") from e

    if metadata.issuer != issuer_url:
        raise DiscoveryError(
            f"Issuer did not match the issuer returned by provider, expected {issuer_url!r} got {metadata.issuer!r}"
        )
    return metadata


def extract_supported_pkce_methods(metadata: ProviderMetadata) -> tuple[str, ...]:
    """
    Reads `code_challenge_methods_supported` from the discovery document.

    Returns:
        tuple[str, ...]: The declared methods in document order, empty if the field is absent.

    Raises:
        MetadataParseError: If the field is present but not a list of strings.
    """
    try:
        claims = metadata.claims(PKCEDiscoveryClaims)
    except ValidationError as e:
        raise MetadataParseError(f"Invalid discovery document: {e}") from e
    return tuple(claims.code_challenge_methods_supported)
