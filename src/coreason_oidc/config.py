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
Configuration for the coreason-oidc package.
"""

from typing import Any
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from coreason_oidc.certpool import CertPool
from coreason_oidc.models import OPENID_SCOPE


INIT_ONLY_FIELDS = frozenset({"cert_pool"})


class InitOnlyFieldsSource(PydanticBaseSettingsSource):
    """
    Wraps a settings source and drops the fields that may only be passed to the constructor.
    """

    def __init__(self, settings_cls: type[BaseSettings], source: PydanticBaseSettingsSource) -> None:
        super().__init__(settings_cls)
        self.source = source

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self.source.get_field_value(field, field_name)

    def __call__(self) -> dict[str, Any]:
        return {name: value for name, value in self.source().items() if name not in INIT_ONLY_FIELDS}


class ProviderConfig(BaseSettings):
    """
    Settings describing how to reach and authenticate against an OIDC provider.

    Attributes:
        issuer_url (str): The OIDC issuer URL (e.g. https://accounts.example.com).
        client_id (str): The OAuth 2.0 Client ID.
        client_secret (SecretStr): The OAuth 2.0 Client Secret. Empty for public clients.
        extra_scopes (list[str]): Scopes requested in addition to `openid`.
        skip_tls_verify (bool): Disables TLS certificate verification. Only for internal/test providers.
        cert_pool (CertPool | None): Certificate authorities replacing the system trust store.
        http_timeout (float): Timeout in seconds for each IdP network operation.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_OIDC_",
        case_sensitive=False,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    issuer_url: str
    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr = SecretStr("")
    extra_scopes: list[str] = Field(default_factory=list)
    skip_tls_verify: bool = False
    cert_pool: CertPool | None = Field(default=None, exclude=True)
    http_timeout: float = Field(default=30.0, gt=0, description="Timeout in seconds for IdP network operations.")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Keeps `cert_pool` init-only: a CertPool object cannot come from the environment.
        """
        return (
            init_settings,
            InitOnlyFieldsSource(settings_cls, env_settings),
            InitOnlyFieldsSource(settings_cls, dotenv_settings),
            InitOnlyFieldsSource(settings_cls, file_secret_settings),
        )

    @field_validator("issuer_url")
    @classmethod
    def validate_issuer_url(cls, v: str) -> str:
        """
        Ensures the issuer is an absolute http(s) URL.

        Args:
            v: The issuer URL.

        Returns:
            The stripped issuer URL.

        Raises:
            ValueError: If the scheme is not http/https or the host is missing.
        """
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Issuer URL must be an absolute http(s) URL, got: {v!r}")
        return v

    @field_validator("extra_scopes")
    @classmethod
    def drop_openid_scope(cls, v: list[str]) -> list[str]:
        """
        Removes blank entries and `openid`, which is always appended by the factory.
        """
        return [scope for scope in (s.strip() for s in v) if scope and scope != OPENID_SCOPE]
