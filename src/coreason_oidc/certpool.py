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
Pool of trusted certificate authorities used as the root of trust for the IdP connection.
"""

import base64
import binascii
import ssl
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives.serialization import Encoding

from coreason_oidc.exceptions import CertPoolError


class CertPool:
    """
    Collects PEM encoded CA certificates from files or inline data.

    When a non-empty pool is supplied to the transport, it replaces the system trust store.
    """

    def __init__(self) -> None:
        self._certificates: list[x509.Certificate] = []

    def add_pem(self, pem: bytes | str, source: str = "inline data") -> None:
        """
        Adds every certificate found in a PEM bundle.

        Args:
            pem: The PEM encoded bundle.
            source: Where the data came from, used in error messages.

        Raises:
            CertPoolError: If the data contains no valid PEM certificate.
        """
        data = pem.encode("ascii", errors="replace") if isinstance(pem, str) else pem
        try:
            certificates = x509.load_pem_x509_certificates(data)
        except ValueError as e:
            raise CertPoolError(f"No valid PEM certificate found in {source}: {e}") from e
        self._certificates.extend(certificates)

    def add_file(self, path: str | Path) -> None:
        """
        Loads a PEM bundle from a file.

        Raises:
            CertPoolError: If the file cannot be read or holds no certificate.
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise CertPoolError(f"Could not read certificate authority file {path}: {e}") from e
        self.add_pem(data, source=str(path))

    def add_base64_encoded(self, data: str) -> None:
        """
        Loads a base64 encoded PEM bundle (e.g. kubeconfig `certificate-authority-data`).

        Raises:
            CertPoolError: If the data is not valid base64 or holds no certificate.
        """
        try:
            decoded = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CertPoolError(f"Invalid base64 certificate authority data: {e}") from e
        self.add_pem(decoded, source="base64 encoded data")

    @property
    def is_empty(self) -> bool:
        return not self._certificates

    def __len__(self) -> int:
        return len(self._certificates)

    def __repr__(self) -> str:
        return f"CertPool(certificates={len(self._certificates)})"

    def apply_to(self, context: ssl.SSLContext) -> None:
        """Loads the collected certificates as trust anchors of `context`."""
        if not self._certificates:
            return
        cadata = "".join(cert.public_bytes(Encoding.PEM).decode("ascii") for cert in self._certificates)
        context.load_verify_locations(cadata=cadata)
