"""
Listener mode selection.
"""

from __future__ import annotations

import logging

from reseeder.common.models import (
    ListenerMode,
    ListenerPlan,
    OnionIdentity,
    ReseedConfig,
    TLSIdentity,
)

logger = logging.getLogger(__name__)


def plan_mode(
    onion_enabled: bool,  # noqa: FBT001
    single_hop: bool,  # noqa: FBT001, ARG001
    tls_host_present: bool,  # noqa: FBT001
    tls_cert_present: bool,  # noqa: FBT001
    tls_key_present: bool,  # noqa: FBT001
) -> ListenerMode:
    """Pick the one listener mode for this run.

    Onion always wins over plain TLS. Single-hop only changes how the onion
    circuit is built, never which mode is chosen.
    """
    tls_material = tls_cert_present and tls_key_present
    if onion_enabled:
        return ListenerMode.ONION_TLS if tls_material else ListenerMode.ONION
    if tls_host_present and tls_material:
        return ListenerMode.TLS
    return ListenerMode.PLAIN


class TransportPlanner:
    """Builds the immutable ListenerPlan from config and provisioned identities."""

    def build_plan(
        self,
        config: ReseedConfig,
        onion_identity: OnionIdentity | None = None,
        tls_identity: TLSIdentity | None = None,
    ) -> ListenerPlan:
        mode = plan_mode(
            onion_enabled=config.onion_enabled,
            single_hop=config.single_hop,
            tls_host_present=tls_identity is not None,
            tls_cert_present=tls_identity is not None,
            tls_key_present=tls_identity is not None,
        )
        logger.debug("Selected %s listener", mode.value)
        return ListenerPlan(
            mode=mode,
            bind_ip=config.bind_ip,
            port=config.port,
            onion_identity=onion_identity if mode.uses_onion else None,
            tls_identity=tls_identity if mode.uses_tls else None,
            single_hop=config.single_hop,
        )
