"""
Validation of raw reseed options into an immutable configuration.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from pathlib import Path

from reseeder.common.config import Config
from reseeder.common.duration import parse_duration
from reseeder.common.exceptions import (
    InvalidDuration,
    InvalidOption,
    MissingRequiredField,
)
from reseeder.common.models import ReseedConfig, ReseedOptions

MAX_PORT = 65535
# longest wait a threading.Event accepts
MAX_INTERVAL = timedelta(seconds=threading.TIMEOUT_MAX)


def signer_file_name(signer_id: str) -> str:
    """Return a filesystem-safe base name for a signing ID."""
    return signer_id.replace("@", "_at_").replace("/", "_").replace("\\", "_")


def default_tls_paths(host: str, config: Config | None = None) -> tuple[Path, Path]:
    """Return the default ``(cert, key)`` paths for a TLS host name."""
    config = config or Config()
    return (
        Path(host + config.TLS_CERT_EXTENSION),
        Path(host + config.TLS_KEY_EXTENSION),
    )


class ConfigValidator:
    """Checks required options and derives defaults without touching disk."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config()

    def validate(self, options: ReseedOptions) -> ReseedConfig:
        if not options.netdb:
            raise MissingRequiredField("netdb")
        if not options.signer:
            raise MissingRequiredField("signer")

        signer_key = options.key or (
            signer_file_name(options.signer) + self.config.SIGNING_KEY_EXTENSION
        )

        tls_cert = Path(options.tls_cert) if options.tls_cert else None
        tls_key = Path(options.tls_key) if options.tls_key else None
        if options.tls_host:
            default_cert, default_key = default_tls_paths(options.tls_host, self.config)
            tls_cert = tls_cert or default_cert
            tls_key = tls_key or default_key

        if not 0 < options.port <= MAX_PORT:
            msg = f"--port must be between 1 and {MAX_PORT}, got {options.port}"
            raise InvalidOption(msg)
        if options.num_ri < 1:
            msg = f"--numRi must be positive, got {options.num_ri}"
            raise InvalidOption(msg)
        if options.num_su3 < 0:
            msg = f"--numSu3 must not be negative, got {options.num_su3}"
            raise InvalidOption(msg)

        rebuild_interval = self._duration(options.interval, "interval")
        if not rebuild_interval:
            raise InvalidDuration(options.interval, "interval")

        return ReseedConfig(
            netdb_dir=Path(options.netdb),
            signer_id=options.signer,
            signer_key_path=Path(signer_key),
            tls_host=options.tls_host or None,
            tls_cert_path=tls_cert,
            tls_key_path=tls_key,
            onion_enabled=options.onion,
            single_hop=options.single_onion,
            onion_key_path=Path(options.onion_key or self.config.DEFAULT_ONION_KEY),
            onion_tls=options.onion_tls,
            bind_ip=options.ip,
            port=options.port,
            num_ri=options.num_ri,
            num_su3=options.num_su3,
            rebuild_interval=rebuild_interval,
            stats_interval=self._duration(options.stats, "stats"),
            prefix=options.prefix.rstrip("/"),
            trust_proxy=options.trust_proxy,
            blacklist_path=Path(options.blacklist) if options.blacklist else None,
            tor_control_port=options.tor_control_port,
        )

    @staticmethod
    def _duration(value: str, option: str) -> timedelta:
        try:
            parsed = parse_duration(value)
        except ValueError as e:
            raise InvalidDuration(value, option) from e
        if parsed < timedelta(0) or parsed > MAX_INTERVAL:
            raise InvalidDuration(value, option)
        return parsed
