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
ClientFactory component for building an OIDCClient from a ProviderConfig.
"""

from typing import TYPE_CHECKING

import anyio
import httpx

from coreason_oidc.client import OIDCClient
from coreason_oidc.clock import Clock, SystemClock
from coreason_oidc.config import ProviderConfig
from coreason_oidc.discovery import discover, extract_supported_pkce_methods
from coreason_oidc.exceptions import CoreasonOIDCError, DiscoveryError
from coreason_oidc.models import OPENID_SCOPE, OAuth2Config, OAuth2Endpoint
from coreason_oidc.models_internal import ProviderMetadata
from coreason_oidc.transport import build_transport
from coreason_oidc.utils.logger import logger as default_logger

if TYPE_CHECKING:
    from loguru import Logger


class ClientFactory:
    """
    Builds OIDCClient instances.

    The factory holds no per-call state, so concurrent calls with different
    configurations are independent.

    Attributes:
        clock (Clock): Forwarded to every client.
        logger (Logger): Receives lifecycle notices and one entry per HTTP round trip.
    """

    def __init__(self, clock: Clock | None = None, logger: "Logger | None" = None) -> None:
        self.clock = clock or SystemClock()
        self.logger = logger or default_logger

    async def _discover(
        self, http_client: httpx.AsyncClient, issuer_url: str, timeout: float | None
    ) -> ProviderMetadata:
        try:
            with anyio.fail_after(timeout):
                return await discover(http_client, issuer_url)
        except TimeoutError as e:
            raise DiscoveryError(f"OIDC discovery against {issuer_url} timed out after {timeout}s") from e

    async def new(self, config: ProviderConfig, timeout: float | None = None) -> OIDCClient:
        """
        Performs OIDC discovery and returns a client for `config`.

        Exactly one discovery attempt is made; retrying is left to the caller.
        Either a complete client is returned or an error is raised.

        Args:
            config: The provider configuration.
            timeout: Overall deadline in seconds for discovery. None for no deadline
                (the per-request `config.http_timeout` still applies).

        Returns:
            OIDCClient: The configured client. The caller owns it and must close it.

        Raises:
            DiscoveryError: If the discovery document cannot be retrieved or is invalid, or on timeout.
            MetadataParseError: If `code_challenge_methods_supported` is malformed.
        """
        if config.skip_tls_verify:
            self.logger.warning(f"TLS certificate verification is disabled for {config.issuer_url}")

        transport = build_transport(
            self.logger,
            skip_tls_verify=config.skip_tls_verify,
            cert_pool=config.cert_pool,
        )
        http_client = httpx.AsyncClient(transport=transport, timeout=config.http_timeout)

        try:
            provider = await self._discover(http_client, config.issuer_url, timeout)
            supported_pkce_methods = extract_supported_pkce_methods(provider)
        except CoreasonOIDCError as e:
            self.logger.error(f"Could not create OIDC client for {config.issuer_url}: {e}")
            with anyio.CancelScope(shield=True):
                await http_client.aclose()
            raise
        except BaseException:
            with anyio.CancelScope(shield=True):
                await http_client.aclose()
            raise

        oauth2_config = OAuth2Config(
            client_id=config.client_id,
            client_secret=config.client_secret,
            endpoint=OAuth2Endpoint(
                auth_url=provider.authorization_endpoint,
                token_url=provider.token_endpoint,
                device_auth_url=provider.device_authorization_endpoint,
            ),
            scopes=(*config.extra_scopes, OPENID_SCOPE),
        )

        self.logger.info(
            f"Discovered OIDC provider {provider.issuer} (supported PKCE methods: {list(supported_pkce_methods)})"
        )
        return OIDCClient(
            http_client=http_client,
            transport=transport,
            provider=provider,
            oauth2_config=oauth2_config,
            supported_pkce_methods=supported_pkce_methods,
            clock=self.clock,
            logger=self.logger,
        )
