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
Custom exceptions for the coreason-oidc package.
"""


class CoreasonOIDCError(Exception):
    """Base exception for all coreason-oidc errors."""


class DiscoveryError(CoreasonOIDCError):
    """
    Raised when the provider metadata cannot be retrieved.

    Covers network failures, timeouts, non-success responses and discovery
    documents that are not valid OIDC provider metadata.
    """


class MetadataParseError(CoreasonOIDCError):
    """Raised when `code_challenge_methods_supported` is present but malformed."""


class CertPoolError(CoreasonOIDCError):
    """Raised when a certificate authority cannot be loaded into the pool."""
