"""
Self-signed certificate issuance for TLS listeners and su3 signers.
"""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from reseeder.common.config import Config
from reseeder.common.exceptions import CertificateIssuanceError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

logger = logging.getLogger(__name__)

SIGNER_ORGANIZATION = "I2P Anonymous Network"
SIGNER_UNIT = "I2P"


class SelfSignedIssuer:
    """Mints host-bound TLS pairs and signer certificates."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config()

    def issue_self_signed_certificate(self, host: str) -> tuple[bytes, bytes]:
        """Return ``(cert_pem, key_pem)`` for a fresh P-384 key bound to host."""
        logger.info("Generating self-signed TLS certificate for %s", host)
        try:
            private_key = ec.generate_private_key(ec.SECP384R1())
            name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, host)])
            not_before = datetime.datetime.now(datetime.timezone.utc)
            certificate = (
                x509.CertificateBuilder()
                .subject_name(name)
                .issuer_name(name)
                .public_key(private_key.public_key())
                .serial_number(x509.random_serial_number())
                .not_valid_before(not_before)
                .not_valid_after(
                    not_before + datetime.timedelta(days=self.config.TLS_CERT_DAYS)
                )
                .add_extension(
                    x509.SubjectAlternativeName([x509.DNSName(host)]), critical=False
                )
                .add_extension(
                    x509.BasicConstraints(ca=False, path_length=None), critical=True
                )
                .add_extension(
                    x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]),
                    critical=False,
                )
                .sign(private_key, hashes.SHA256())
            )
        except ValueError as e:
            msg = f"Unable to issue TLS certificate for {host}: {e}"
            raise CertificateIssuanceError(msg) from e

        cert_pem = certificate.public_bytes(serialization.Encoding.PEM)
        key_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cert_pem, key_pem

    def issue_signer_certificate(
        self, signer_id: str, private_key: RSAPrivateKey
    ) -> bytes:
        """Return the PEM certificate routers use to verify a signer's bundles."""
        logger.info("Generating signer certificate for %s", signer_id)
        name = x509.Name(
            [
                x509.NameAttribute(NameOID.ORGANIZATION_NAME, SIGNER_ORGANIZATION),
                x509.NameAttribute(NameOID.ORGANIZATIONAL_UNIT_NAME, SIGNER_UNIT),
                x509.NameAttribute(NameOID.COMMON_NAME, signer_id),
            ]
        )
        not_before = datetime.datetime.now(datetime.timezone.utc)
        try:
            certificate = (
                x509.CertificateBuilder()
                .subject_name(name)
                .issuer_name(name)
                .public_key(private_key.public_key())
                .serial_number(x509.random_serial_number())
                .not_valid_before(not_before)
                .not_valid_after(
                    not_before + datetime.timedelta(days=self.config.SIGNER_CERT_DAYS)
                )
                .add_extension(
                    x509.BasicConstraints(ca=True, path_length=None), critical=True
                )
                .add_extension(
                    x509.KeyUsage(
                        digital_signature=True,
                        content_commitment=False,
                        key_encipherment=False,
                        data_encipherment=False,
                        key_agreement=False,
                        key_cert_sign=True,
                        crl_sign=False,
                        encipher_only=False,
                        decipher_only=False,
                    ),
                    critical=True,
                )
                .sign(private_key, hashes.SHA512())
            )
        except (TypeError, ValueError) as e:
            msg = f"Unable to issue signer certificate for {signer_id}: {e}"
            raise CertificateIssuanceError(msg) from e
        return certificate.public_bytes(serialization.Encoding.PEM)
