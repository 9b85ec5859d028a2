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
OIDCClient: the configured handle used by the authorization code and device flows.
"""

from typing import TYPE_CHECKING, Any

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client

from coreason_oidc.clock import Clock
from coreason_oidc.models import OAuth2Config, PKCEMethod
from coreason_oidc.models_internal import ProviderMetadata

if TYPE_CHECKING:
    from loguru import Logger


class _SharedTransport(httpx.AsyncBaseTransport):
    """Delegates round trips to a transport owned by someone else."""

    def __init__(self, transport: httpx.AsyncBaseTransport) -> None:
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._transport.handle_async_request(request)

    async def aclose(self) -> None:
        pass


class OIDCClient:
    """
    Immutable aggregate produced by `ClientFactory.new`.

    All attributes are read-only. The client owns its HTTP client; close it with
    `aclose()` or by using the client as an async context manager.
    """

    __slots__ = (
        "_http_client",
        "_transport",
        "_provider",
        "_oauth2_config",
        "_supported_pkce_methods",
        "_clock",
        "_logger",
    )

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        transport: httpx.AsyncBaseTransport,
        provider: ProviderMetadata,
        oauth2_config: OAuth2Config,
        supported_pkce_methods: tuple[str, ...],
        clock: Clock,
        logger: "Logger",
    ) -> None:
        object.__setattr__(self, "_http_client", http_client)
        object.__setattr__(self, "_transport", transport)
        object.__setattr__(self, "_provider", provider)
        object.__setattr__(self, "_oauth2_config", oauth2_config)
        object.__setattr__(self, "_supported_pkce_methods", tuple(supported_pkce_methods))
        object.__setattr__(self, "_clock", clock)
        object.__setattr__(self, "_logger", logger)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client

    @property
    def provider(self) -> ProviderMetadata:
        return self._provider

    @property
    def oauth2_config(self) -> OAuth2Config:
        return self._oauth2_config

    @property
    def supported_pkce_methods(self) -> tuple[str, ...]:
        return self._supported_pkce_methods

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def logger(self) -> "Logger":
        return self._logger

    def supports_pkce_method(self, method: str) -> bool:
        return method in self._supported_pkce_methods

    def preferred_pkce_method(self) -> str | None:
        """
        Returns the PKCE method flows should use.

        Only S256 is used. `plain` offers no protection against an intercepted
        authorization request, so a provider that does not declare S256 gets no PKCE.
        """
        if self.supports_pkce_method(PKCEMethod.S256):
            return PKCEMethod.S256.value
        return None

    def oauth2_session(self, redirect_uri: str | None = None) -> AsyncOAuth2Client:
        """
        Creates an Authlib OAuth 2.0 session from the OAuth2 configuration.

        The session sends its requests through this client's transport (same TLS
        policy and logging). Closing the session leaves this client usable.

        Args:
            redirect_uri: The redirect URI for the authorization code flow.

        Returns:
            AsyncOAuth2Client: A session ready for `create_authorization_url` / `fetch_token`.
        """
        config = self._oauth2_config
        return AsyncOAuth2Client(
            client_id=config.client_id,
            client_secret=config.client_secret.get_secret_value() or None,
            scope=config.scope,
            redirect_uri=redirect_uri,
            code_challenge_method=self.preferred_pkce_method(),
            token_endpoint=config.endpoint.token_url,
            transport=_SharedTransport(self._transport),
            timeout=self._http_client.timeout,
        )

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def __aenter__(self) -> "OIDCClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return (
            f"OIDCClient(issuer={self._provider.issuer!r}, "
            f"client_id={self._oauth2_config.client_id!r}, "
            f"scopes={self._oauth2_config.scopes!r}, "
            f"supported_pkce_methods={self._supported_pkce_methods!r})"
        )
