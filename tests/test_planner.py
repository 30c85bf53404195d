import itertools
from datetime import timedelta
from pathlib import Path

import pytest

from reseeder.common.models import (
    ListenerMode,
    ListenerPlan,
    OnionIdentity,
    ReseedConfig,
    TLSIdentity,
)
from reseeder.server.onion import service_id_from_seed
from reseeder.server.planner import TransportPlanner, plan_mode

SEED = bytes(32)


def expected_mode(onion, host, cert, key):
    if onion:
        return ListenerMode.ONION_TLS if cert and key else ListenerMode.ONION
    if host and cert and key:
        return ListenerMode.TLS
    return ListenerMode.PLAIN


@pytest.mark.parametrize(
    ("onion", "single_hop", "host", "cert", "key"),
    list(itertools.product([True, False], repeat=5)),
)
def test_decision_table_is_complete(onion, single_hop, host, cert, key):
    mode = plan_mode(onion, single_hop, host, cert, key)
    assert mode is expected_mode(onion, host, cert, key)


@pytest.mark.parametrize("host", [True, False])
def test_onion_takes_precedence_over_tls(host):
    assert plan_mode(True, False, host, True, True) is ListenerMode.ONION_TLS
    assert plan_mode(True, False, host, False, False) is ListenerMode.ONION


def test_single_hop_never_changes_mode():
    for fields in itertools.product([True, False], repeat=4):
        onion, host, cert, key = fields
        assert plan_mode(onion, True, host, cert, key) is plan_mode(
            onion, False, host, cert, key
        )


def make_config(**overrides):
    values = {
        "netdb_dir": Path("netDb"),
        "signer_id": "me@mail.i2p",
        "signer_key_path": Path("me_at_mail.i2p.pem"),
        "onion_key_path": Path("onion.key"),
        "bind_ip": "0.0.0.0",
        "port": 8443,
        "num_ri": 77,
        "num_su3": 0,
        "rebuild_interval": timedelta(hours=90),
        "stats_interval": timedelta(0),
        "tor_control_port": 9051,
    }
    values.update(overrides)
    return ReseedConfig(**values)


def onion_identity():
    return OnionIdentity(
        key_path=Path("onion.key"), seed=SEED, service_id=service_id_from_seed(SEED)
    )


def tls_identity(host="reseed.example.org"):
    return TLSIdentity(
        host_name=host, cert_path=Path(f"{host}.crt"), key_path=Path(f"{host}.pem")
    )


def test_build_plain_plan():
    plan = TransportPlanner().build_plan(make_config())
    assert plan.mode is ListenerMode.PLAIN
    assert plan.onion_identity is None
    assert plan.tls_identity is None
    assert plan.bind_address == "0.0.0.0:8443"
    assert plan.onion_remote_port is None


def test_build_tls_plan():
    plan = TransportPlanner().build_plan(make_config(tls_host="reseed.example.org"), None, tls_identity())
    assert plan.mode is ListenerMode.TLS
    assert plan.tls_identity.host_name == "reseed.example.org"


def test_build_onion_tls_plan():
    identity = onion_identity()
    plan = TransportPlanner().build_plan(
        make_config(onion_enabled=True, single_hop=True),
        identity,
        tls_identity(identity.hostname),
    )
    assert plan.mode is ListenerMode.ONION_TLS
    assert plan.single_hop is True
    assert plan.onion_identity == identity
    assert plan.onion_remote_port == 443


def test_build_onion_plan_without_tls():
    plan = TransportPlanner().build_plan(make_config(onion_enabled=True), onion_identity())
    assert plan.mode is ListenerMode.ONION
    assert plan.tls_identity is None
    assert plan.onion_remote_port == 80


def test_plan_requires_identities_for_mode():
    with pytest.raises(ValueError):
        ListenerPlan(mode=ListenerMode.ONION, bind_ip="0.0.0.0", port=8443)
    with pytest.raises(ValueError):
        ListenerPlan(mode=ListenerMode.TLS, bind_ip="0.0.0.0", port=8443)


def test_plan_is_immutable():
    plan = TransportPlanner().build_plan(make_config())
    with pytest.raises(ValueError):
        plan.mode = ListenerMode.TLS


def test_ipv6_bind_address():
    plan = TransportPlanner().build_plan(make_config(bind_ip="::"))
    assert plan.bind_address == "[::]:8443"
