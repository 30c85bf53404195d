"""
Pydantic models for configuration, credentials and listener plans.
"""

from __future__ import annotations

from datetime import timedelta  # noqa: TC003
from enum import Enum
from pathlib import Path  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ListenerMode(str, Enum):
    PLAIN = "plain"
    TLS = "tls"
    ONION = "onion"
    ONION_TLS = "onion-tls"

    @property
    def uses_onion(self) -> bool:
        return self in (ListenerMode.ONION, ListenerMode.ONION_TLS)

    @property
    def uses_tls(self) -> bool:
        return self in (ListenerMode.TLS, ListenerMode.ONION_TLS)


class ReseedOptions(BaseModel):
    """Raw options as received from the command line."""

    netdb: str | None = None
    signer: str | None = None
    key: str | None = None
    tls_host: str | None = None
    tls_cert: str | None = None
    tls_key: str | None = None
    onion: bool = False
    single_onion: bool = False
    onion_key: str = "onion.key"
    onion_tls: bool = True
    ip: str = "0.0.0.0"  # noqa: S104
    port: int = 8443
    num_ri: int = 77
    num_su3: int = 0
    interval: str = "90h"
    prefix: str = ""
    trust_proxy: bool = False
    blacklist: str | None = None
    stats: str = "0"
    tor_control_port: int = 9051


class ReseedConfig(BaseModel):
    """Validated configuration, built once and never mutated."""

    model_config = ConfigDict(frozen=True)

    netdb_dir: Path
    signer_id: str
    signer_key_path: Path
    tls_host: str | None = None
    tls_cert_path: Path | None = None
    tls_key_path: Path | None = None
    onion_enabled: bool = False
    single_hop: bool = False
    onion_key_path: Path
    onion_tls: bool = True
    bind_ip: str
    port: int
    num_ri: int
    num_su3: int
    rebuild_interval: timedelta
    stats_interval: timedelta
    prefix: str = ""
    trust_proxy: bool = False
    blacklist_path: Path | None = None
    tor_control_port: int


class OnionIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    key_path: Path
    seed: bytes = Field(repr=False)
    service_id: str

    @property
    def hostname(self) -> str:
        return f"{self.service_id}.onion"


class TLSIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    host_name: str
    cert_path: Path
    key_path: Path


class SigningIdentity(BaseModel):
    """Signing key handed to the packaging engine."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    signer_id: str
    key_path: Path
    private_key: Any = Field(repr=False)


class ListenerPlan(BaseModel):
    """Everything the serving subsystem needs to open the single listener."""

    model_config = ConfigDict(frozen=True)

    mode: ListenerMode
    bind_ip: str
    port: int
    onion_identity: OnionIdentity | None = None
    tls_identity: TLSIdentity | None = None
    single_hop: bool = False

    @model_validator(mode="after")
    def _check_identities(self) -> ListenerPlan:
        if self.mode.uses_onion and self.onion_identity is None:
            msg = f"{self.mode.value} listener requires an onion identity"
            raise ValueError(msg)
        if self.mode.uses_tls and self.tls_identity is None:
            msg = f"{self.mode.value} listener requires a TLS identity"
            raise ValueError(msg)
        return self

    @property
    def bind_address(self) -> str:
        if ":" in self.bind_ip:
            return f"[{self.bind_ip}]:{self.port}"
        return f"{self.bind_ip}:{self.port}"

    @property
    def onion_remote_port(self) -> int | None:
        if self.mode is ListenerMode.ONION_TLS:
            return 443
        if self.mode is ListenerMode.ONION:
            return 80
        return None


class RouterInfo(BaseModel):
    """A single record read from the netDb directory."""

    name: str
    mod_time: float
    data: bytes = Field(repr=False)
