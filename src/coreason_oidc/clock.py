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
Time source handed to authentication flows (e.g. for token expiry checks).
"""

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Protocol for a source of the current time."""

    def now(self) -> datetime:
        """Returns the current time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Clock backed by the system wall clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)
