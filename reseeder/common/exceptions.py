"""
Custom exceptions for the reseed server.
"""

from __future__ import annotations


class ReseedError(Exception):
    """Base exception for reseed server failures."""


class ConfigurationError(ReseedError):
    """Exception for configuration that cannot be used to start the server.

    Raised before any credential file is touched, so aborting leaves no
    partial side effects behind.
    """


class MissingRequiredField(ConfigurationError):
    """Exception for a required option with no safe default."""

    def __init__(self, field: str) -> None:
        super().__init__(f"--{field} is required")
        self.field = field


class InvalidDuration(ConfigurationError):
    """Exception for a malformed duration string."""

    def __init__(self, value: str, option: str = "interval") -> None:
        super().__init__(f"'{value}' is not a valid time interval for --{option}")
        self.value = value
        self.option = option


class InvalidOption(ConfigurationError):
    """Exception for an option value outside its accepted range."""


class OperationalError(ReseedError):
    """Exception for failures after validation; the process must terminate."""


class CredentialError(OperationalError):
    """Exception for credential material that cannot be loaded or persisted."""


class CertificateIssuanceError(CredentialError):
    """Exception for a certificate that could not be minted."""


class ServeError(OperationalError):
    """Exception for listener bind or serve failures."""
