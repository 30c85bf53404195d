"""
Startup sequence: validate, provision credentials, plan, hand off.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from pydantic import BaseModel, ConfigDict

from reseeder.common.models import (
    ListenerPlan,
    OnionIdentity,
    ReseedConfig,
    ReseedOptions,
    SigningIdentity,
    TLSIdentity,
)

from .credentials import CredentialStore
from .listener import ReseedServer
from .planner import TransportPlanner
from .telemetry import MemoryStatsReporter
from .validator import ConfigValidator, default_tls_paths

if TYPE_CHECKING:
    from datetime import timedelta
    from pathlib import Path

    from reseeder.common.interfaces import IPeriodicTask, IServingSubsystem

logger = logging.getLogger(__name__)


class BootstrapResult(BaseModel):
    """Everything prepared before the hand-off to the serving subsystem."""

    model_config = ConfigDict(frozen=True)

    config: ReseedConfig
    plan: ListenerPlan
    signing: SigningIdentity
    onion: OnionIdentity | None = None
    tls: TLSIdentity | None = None


class Bootstrapper:
    """Orchestrates validation, credential provisioning and the listener hand-off.

    Errors propagate as ReseedError subclasses; deciding whether the process
    exits is left to the caller.
    """

    def __init__(
        self,
        credential_store: CredentialStore | None = None,
        validator: ConfigValidator | None = None,
        planner: TransportPlanner | None = None,
        serving_factory: Callable[[ReseedConfig], IServingSubsystem] = ReseedServer,
        telemetry_factory: Callable[[timedelta], IPeriodicTask] = MemoryStatsReporter,
    ):
        self.credential_store = credential_store or CredentialStore()
        self.validator = validator or ConfigValidator()
        self.planner = planner or TransportPlanner()
        self.serving_factory = serving_factory
        self.telemetry_factory = telemetry_factory

    def prepare(self, options: ReseedOptions) -> BootstrapResult:
        config = self.validator.validate(options)
        store = self.credential_store

        onion = None
        if config.onion_enabled:
            onion = store.load_or_create_onion_identity(config.onion_key_path)

        tls_host, tls_cert, tls_key = self._resolve_tls(config, onion)
        tls = None
        if tls_host and tls_cert and tls_key:
            tls = store.load_or_create_tls_identity(tls_host, tls_cert, tls_key)

        signing = store.load_or_create_signing_identity(
            config.signer_key_path, config.signer_id
        )
        plan = self.planner.build_plan(config, onion, tls)
        return BootstrapResult(
            config=config, plan=plan, signing=signing, onion=onion, tls=tls
        )

    @staticmethod
    def _resolve_tls(
        config: ReseedConfig, onion: OnionIdentity | None
    ) -> tuple[str | None, Path | None, Path | None]:
        """Return the TLS host and paths.

        Onion mode without an explicit TLS host binds the certificate to the
        onion address itself.
        """
        if config.tls_host:
            return config.tls_host, config.tls_cert_path, config.tls_key_path
        if onion is None or not config.onion_tls:
            return None, None, None

        default_cert, default_key = default_tls_paths(onion.hostname)
        return (
            onion.hostname,
            config.tls_cert_path or default_cert,
            config.tls_key_path or default_key,
        )

    def run(self, options: ReseedOptions) -> None:
        """Prepare everything, then block serving until the listener stops."""
        result = self.prepare(options)
        plan = result.plan
        logger.info("Starting %s listener on %s", plan.mode.value, plan.bind_address)

        telemetry = None
        if result.config.stats_interval:
            telemetry = self.telemetry_factory(result.config.stats_interval)
            telemetry.start()

        serving = self.serving_factory(result.config)
        try:
            serving.start_serving(plan, result.signing, result.config.netdb_dir)
        finally:
            if telemetry is not None:
                telemetry.stop()
