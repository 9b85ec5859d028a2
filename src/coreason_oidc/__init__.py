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
OpenID Connect client construction: provider discovery, TLS transport policy and PKCE capability negotiation.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .certpool import CertPool
from .client import OIDCClient
from .clock import Clock, SystemClock
from .config import ProviderConfig
from .exceptions import CertPoolError, CoreasonOIDCError, DiscoveryError, MetadataParseError
from .factory import ClientFactory
from .models import OAuth2Config, OAuth2Endpoint, PKCEMethod

__all__ = [
    "CertPool",
    "CertPoolError",
    "ClientFactory",
    "Clock",
    "CoreasonOIDCError",
    "DiscoveryError",
    "MetadataParseError",
    "OAuth2Config",
    "OAuth2Endpoint",
    "OIDCClient",
    "PKCEMethod",
    "ProviderConfig",
    "SystemClock",
]
