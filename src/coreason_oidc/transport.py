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
HTTP transport module enforcing the TLS policy for the Identity Provider connection.

The transport stack is:

    LoggingTransport -> EnvironmentProxyTransport -> httpx.AsyncHTTPTransport (per proxy)
"""

import ipaddress
import ssl
import time
import urllib.request
from typing import TYPE_CHECKING

import httpx

from coreason_oidc.certpool import CertPool

if TYPE_CHECKING:
    from loguru import Logger


def build_ssl_context(skip_tls_verify: bool = False, cert_pool: CertPool | None = None) -> ssl.SSLContext:
    """
    Creates the client TLS context.

    Args:
        skip_tls_verify: Disables certificate and hostname verification entirely.
        cert_pool: If given and not empty, it becomes the only root of trust.

    Returns:
        ssl.SSLContext: The configured client context.
    """
    if cert_pool is not None and not cert_pool.is_empty:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        cert_pool.apply_to(context)
    else:
        context = ssl.create_default_context()

    if skip_tls_verify:
        # check_hostname must be cleared before verify_mode can be relaxed
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    # Some providers require renegotiation mid-handshake. Always allowed.
    context.options &= ~ssl.OP_NO_RENEGOTIATION
    return context


def environment_proxies() -> dict[str, str]:
    """Returns the proxy settings from HTTP_PROXY, HTTPS_PROXY, NO_PROXY (any case)."""
    return urllib.request.getproxies_environment()


def proxy_url(value: str) -> str:
    """Completes a proxy setting such as `proxy.corp:3128` with the `http://` scheme."""
    value = value.strip()
    return value if "://" in value else f"http://{value}"


def is_loopback_host(host: str) -> bool:
    """True for `localhost` and loopback addresses, which are never proxied."""
    if host.lower() == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


class UnusableProxyTransport(httpx.AsyncBaseTransport):
    """
    Stands in for a proxy whose environment setting cannot be used.

    Building the transport stack never fails; the problem is reported as an
    `httpx.ProxyError` by every request that would have used the proxy.
    """

    def __init__(self, value: str, error: Exception) -> None:
        self.value = value
        self.error = error

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        raise httpx.ProxyError(f"Invalid proxy setting {self.value!r}: {self.error}", request=request)


class EnvironmentProxyTransport(httpx.AsyncBaseTransport):
    """
    Routes each request directly or through the proxy configured in the environment.

    The environment is read once, when the transport is built. Requests to
    `localhost` and loopback addresses always go direct.
    """

    def __init__(self, verify: ssl.SSLContext, proxies: dict[str, str] | None = None) -> None:
        self._proxy_env = environment_proxies() if proxies is None else proxies
        self._direct = httpx.AsyncHTTPTransport(verify=verify)
        self._proxies: dict[str, httpx.AsyncBaseTransport] = {}
        for scheme in ("http", "https"):
            value = self._proxy_env.get(scheme)
            if not value:
                continue
            try:
                self._proxies[scheme] = httpx.AsyncHTTPTransport(verify=verify, proxy=proxy_url(value))
            except (ValueError, httpx.InvalidURL) as e:
                self._proxies[scheme] = UnusableProxyTransport(value, e)

    def select(self, url: httpx.URL) -> httpx.AsyncBaseTransport:
        """Returns the transport used for `url`."""
        proxy = self._proxies.get(url.scheme)
        if proxy is None or is_loopback_host(url.host):
            return self._direct
        host = url.host if url.port is None else f"{url.host}:{url.port}"
        if urllib.request.proxy_bypass_environment(host, self._proxy_env):
            return self._direct
        return proxy

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self.select(request.url).handle_async_request(request)

    async def aclose(self) -> None:
        await self._direct.aclose()
        for proxy in self._proxies.values():
            await proxy.aclose()


class LoggingTransport(httpx.AsyncBaseTransport):
    """
    Pass-through transport recording every round trip.

    Each request produces exactly one log entry (status or error). Requests,
    responses and errors are handed back unchanged.
    """

    def __init__(self, base: httpx.AsyncBaseTransport, logger: "Logger") -> None:
        self.base = base
        self.logger = logger

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        started = time.perf_counter()
        try:
            response = await self.base.handle_async_request(request)
        except BaseException as e:
            elapsed = time.perf_counter() - started
            self.logger.debug(f"{request.method} {request.url} failed after {elapsed:.3f}s: {e!r}")
            raise
        elapsed = time.perf_counter() - started
        self.logger.debug(f"{request.method} {request.url} -> {response.status_code} ({elapsed:.3f}s)")
        return response

    async def aclose(self) -> None:
        await self.base.aclose()


def build_transport(
    logger: "Logger",
    skip_tls_verify: bool = False,
    cert_pool: CertPool | None = None,
) -> LoggingTransport:
    """
    Assembles the instrumented transport for the Identity Provider.

    Args:
        logger: Receives one entry per HTTP round trip.
        skip_tls_verify: Disables TLS verification.
        cert_pool: Custom root of trust.

    Returns:
        LoggingTransport: The transport to give to `httpx.AsyncClient`.
    """
    context = build_ssl_context(skip_tls_verify=skip_tls_verify, cert_pool=cert_pool)
    return LoggingTransport(base=EnvironmentProxyTransport(verify=context), logger=logger)
