"""
Default settings for the reseed server.
"""

from __future__ import annotations

import logging
import os


class Config:
    """Central configuration class for all system defaults."""

    def __init__(self) -> None:
        # Listener settings
        self.DEFAULT_IP: str = os.getenv("RESEEDER_IP", "0.0.0.0")  # noqa: S104
        self.DEFAULT_PORT: int = int(os.getenv("RESEEDER_PORT", "8443"))
        self.TOR_CONTROL_PORT: int = int(os.getenv("RESEEDER_TOR_CONTROL_PORT", "9051"))

        # Credential files
        self.DEFAULT_ONION_KEY: str = "onion.key"
        self.SIGNING_KEY_EXTENSION: str = ".pem"
        self.SIGNING_CERT_EXTENSION: str = ".crt"
        self.TLS_CERT_EXTENSION: str = ".crt"
        self.TLS_KEY_EXTENSION: str = ".pem"
        self.PRIVATE_FILE_MODE: int = 0o600

        # Key material
        self.SIGNING_KEY_SIZE: int = 4096
        self.SIGNER_CERT_DAYS: int = 10 * 365
        self.TLS_CERT_DAYS: int = 5 * 365

        # Packaging engine pass-through
        self.DEFAULT_INTERVAL: str = "90h"
        self.DEFAULT_STATS_INTERVAL: str = "0"
        self.DEFAULT_NUM_RI: int = 77
        self.DEFAULT_NUM_SU3: int = 0

        # Logging
        self.LOG_LEVEL: int = getattr(
            logging, os.getenv("RESEEDER_LOG_LEVEL", "INFO").upper(), logging.INFO
        )
        self.LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        self.LOG_FILE: str | None = os.getenv("RESEEDER_LOG_FILE")
        self.LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024
        self.LOG_FILE_BACKUPS: int = 5
