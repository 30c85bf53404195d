"""
Load-or-create storage for the onion, TLS and signing credentials.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from reseeder.common.config import Config
from reseeder.common.exceptions import CredentialError
from reseeder.common.models import OnionIdentity, SigningIdentity, TLSIdentity

from .certs import SelfSignedIssuer
from .onion import SEED_SIZE, generate_seed, service_id_from_seed

if TYPE_CHECKING:
    from reseeder.common.interfaces import ICertificateIssuer

logger = logging.getLogger(__name__)


def write_private_file(path: Path, data: bytes, mode: int = 0o600) -> None:
    """Atomically replace ``path`` with ``data``, readable only by its owner.

    The bytes land in a temporary file beside ``path`` and are renamed over
    it once synced, so a failed write never leaves ``path`` truncated.
    """
    if path.parent != Path():
        path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)  # noqa: PTH101
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)  # noqa: PTH108
        raise


def restrict_permissions(path: Path, mode: int = 0o600) -> None:
    """Tighten ``path`` to ``mode`` without touching its contents."""
    if stat.S_IMODE(path.stat().st_mode) != mode:
        logger.warning("Restricting permissions of %s to %o", path, mode)
        path.chmod(mode)


class CredentialStore:
    """Provisions each kind of credential independently.

    Every operation either returns material that is persisted on disk or
    raises CredentialError; partially provisioned credentials are never
    returned.
    """

    def __init__(
        self,
        issuer: ICertificateIssuer | None = None,
        config: Config | None = None,
        signing_key_size: int | None = None,
    ):
        self.config = config or Config()
        self.issuer = issuer or SelfSignedIssuer(self.config)
        self.signing_key_size = signing_key_size or self.config.SIGNING_KEY_SIZE

    def load_or_create_onion_identity(self, path: Path) -> OnionIdentity:
        """Reuse the seed stored at ``path`` or generate and persist a new one."""
        if path.exists():
            try:
                seed = path.read_bytes()
            except OSError as e:
                msg = f"Unable to read onion key {path}: {e}"
                raise CredentialError(msg) from e
            if len(seed) != SEED_SIZE:
                msg = (
                    f"Onion key {path} holds {len(seed)} bytes, "
                    f"expected a raw {SEED_SIZE}-byte Ed25519 seed"
                )
                raise CredentialError(msg)
            # the stored key is the advertised address; never rewrite it
            try:
                restrict_permissions(path, self.config.PRIVATE_FILE_MODE)
            except OSError as e:
                msg = f"Unable to restrict permissions of onion key {path}: {e}"
                raise CredentialError(msg) from e
            logger.info("Loaded onion key from %s", path)
        else:
            logger.info("No onion key at %s, generating a new one", path)
            seed = generate_seed()
            try:
                write_private_file(path, seed, self.config.PRIVATE_FILE_MODE)
            except OSError as e:
                msg = f"Unable to persist onion key {path}: {e}"
                raise CredentialError(msg) from e

        identity = OnionIdentity(
            key_path=path, seed=seed, service_id=service_id_from_seed(seed)
        )
        logger.info("Onion address: %s", identity.hostname)
        return identity

    def load_or_create_tls_identity(
        self, host: str, cert_path: Path, key_path: Path
    ) -> TLSIdentity:
        """Accept an existing certificate pair or issue one bound to ``host``."""
        if cert_path.exists() and key_path.exists():
            logger.info("Using existing TLS certificate %s", cert_path)
            return TLSIdentity(host_name=host, cert_path=cert_path, key_path=key_path)

        missing = [str(p) for p in (cert_path, key_path) if not p.exists()]
        logger.warning(
            "TLS material missing (%s), issuing a self-signed pair for %s",
            ", ".join(missing),
            host,
        )
        cert_pem, key_pem = self.issuer.issue_self_signed_certificate(host)
        try:
            write_private_file(key_path, key_pem, self.config.PRIVATE_FILE_MODE)
            write_private_file(cert_path, cert_pem, 0o644)
        except OSError as e:
            msg = f"Unable to persist TLS certificate for {host}: {e}"
            raise CredentialError(msg) from e

        logger.info("TLS certificate saved to %s, key to %s", cert_path, key_path)
        return TLSIdentity(host_name=host, cert_path=cert_path, key_path=key_path)

    def load_or_create_signing_identity(
        self, path: Path, signer_id: str
    ) -> SigningIdentity:
        """Load the su3 signing key at ``path``, generating it only if absent.

        An existing key file is never overwritten. A new key is announced at
        WARNING level; it is the only file written.
        """
        if path.exists():
            private_key = self._load_signing_key(path)
            logger.info("Loaded signing key for %s from %s", signer_id, path)
            return SigningIdentity(
                signer_id=signer_id, key_path=path, private_key=private_key
            )

        logger.warning(
            "Signing key %s does not exist, generating a new %d-bit key for %s",
            path,
            self.signing_key_size,
            signer_id,
        )
        private_key = rsa.generate_private_key(
            public_exponent=65537, key_size=self.signing_key_size
        )
        key_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )
        try:
            write_private_file(path, key_pem, self.config.PRIVATE_FILE_MODE)
        except OSError as e:
            msg = f"Unable to persist signing key {path}: {e}"
            raise CredentialError(msg) from e

        logger.info("Signing key saved to %s", path)
        return SigningIdentity(
            signer_id=signer_id, key_path=path, private_key=private_key
        )

    def export_signer_certificate(self, signing: SigningIdentity) -> Path:
        """Write the certificate routers use to verify this signer, if absent."""
        cert_path = signing.key_path.with_suffix(self.config.SIGNING_CERT_EXTENSION)
        if cert_path.exists():
            logger.info("Signer certificate %s already exists", cert_path)
            return cert_path

        cert_pem = self.issuer.issue_signer_certificate(
            signing.signer_id, signing.private_key
        )
        try:
            write_private_file(cert_path, cert_pem, 0o644)
        except OSError as e:
            msg = f"Unable to persist signer certificate {cert_path}: {e}"
            raise CredentialError(msg) from e
        logger.info("Signer certificate saved to %s", cert_path)
        return cert_path

    @staticmethod
    def _load_signing_key(path: Path) -> rsa.RSAPrivateKey:
        try:
            with path.open("rb") as f:
                private_key = serialization.load_pem_private_key(f.read(), None)
        except (OSError, ValueError, TypeError) as e:
            msg = f"Unable to load signing key {path}: {e}"
            raise CredentialError(msg) from e
        if not isinstance(private_key, rsa.RSAPrivateKey):
            msg = f"Signing key {path} is not an RSA private key"
            raise CredentialError(msg)
        return private_key
