from datetime import timedelta
from pathlib import Path

import pytest

from reseeder.common.exceptions import InvalidDuration, InvalidOption, MissingRequiredField
from reseeder.common.models import ReseedOptions
from reseeder.server.validator import ConfigValidator, signer_file_name


def test_missing_netdb():
    with pytest.raises(MissingRequiredField) as exc_info:
        ConfigValidator().validate(ReseedOptions(signer="me@mail.i2p"))
    assert exc_info.value.field == "netdb"


def test_missing_signer():
    with pytest.raises(MissingRequiredField) as exc_info:
        ConfigValidator().validate(ReseedOptions(netdb="/var/netDb"))
    assert exc_info.value.field == "signer"
    assert "--signer is required" in str(exc_info.value)


def test_signer_file_name():
    assert signer_file_name("me@mail.i2p") == "me_at_mail.i2p"
    assert signer_file_name("a/b@c") == "a_b_at_c"


def test_defaults():
    config = ConfigValidator().validate(
        ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p")
    )
    assert config.signer_key_path == Path("me_at_mail.i2p.pem")
    assert config.onion_key_path == Path("onion.key")
    assert config.rebuild_interval == timedelta(hours=90)
    assert config.stats_interval == timedelta(0)
    assert config.tls_host is None
    assert config.tls_cert_path is None
    assert config.tls_key_path is None
    assert config.bind_ip == "0.0.0.0"
    assert config.port == 8443


def test_tls_paths_default_from_host():
    config = ConfigValidator().validate(
        ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", tls_host="example.onion")
    )
    assert config.tls_cert_path == Path("example.onion.crt")
    assert config.tls_key_path == Path("example.onion.pem")


def test_explicit_tls_paths_win():
    config = ConfigValidator().validate(
        ReseedOptions(
            netdb="/var/netDb",
            signer="me@mail.i2p",
            tls_host="reseed.example.org",
            tls_cert="/etc/tls/fullchain.pem",
        )
    )
    assert config.tls_cert_path == Path("/etc/tls/fullchain.pem")
    assert config.tls_key_path == Path("reseed.example.org.pem")


def test_explicit_signing_key_path():
    config = ConfigValidator().validate(
        ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", key="/keys/su3.pem")
    )
    assert config.signer_key_path == Path("/keys/su3.pem")


def test_invalid_interval():
    with pytest.raises(InvalidDuration) as exc_info:
        ConfigValidator().validate(
            ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", interval="90x")
        )
    assert exc_info.value.value == "90x"


@pytest.mark.parametrize("interval", ["0", "-1h"])
def test_interval_must_be_positive(interval):
    with pytest.raises(InvalidDuration):
        ConfigValidator().validate(
            ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", interval=interval)
        )


@pytest.mark.parametrize("interval", ["9999999999999h", "3000000h"])
def test_interval_too_large(interval):
    with pytest.raises(InvalidDuration) as exc_info:
        ConfigValidator().validate(
            ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", interval=interval)
        )
    assert exc_info.value.value == interval


def test_stats_interval_too_large():
    with pytest.raises(InvalidDuration) as exc_info:
        ConfigValidator().validate(
            ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", stats="3000000h")
        )
    assert exc_info.value.option == "stats"


def test_ten_year_interval_accepted():
    config = ConfigValidator().validate(
        ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", interval="87600h")
    )
    assert config.rebuild_interval == timedelta(hours=87600)


def test_invalid_stats_interval():
    with pytest.raises(InvalidDuration) as exc_info:
        ConfigValidator().validate(
            ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", stats="often")
        )
    assert exc_info.value.option == "stats"


@pytest.mark.parametrize(
    "overrides", [{"port": 0}, {"port": 70000}, {"num_ri": 0}, {"num_su3": -1}]
)
def test_invalid_options(overrides):
    with pytest.raises(InvalidOption):
        ConfigValidator().validate(
            ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p", **overrides)
        )


def test_validation_does_not_touch_disk(written_files):
    with pytest.raises(InvalidDuration):
        ConfigValidator().validate(
            ReseedOptions(netdb="netDb", signer="me@mail.i2p", interval="90x")
        )
    ConfigValidator().validate(
        ReseedOptions(netdb="netDb", signer="me@mail.i2p", tls_host="example.org")
    )
    assert written_files() == set()


def test_config_is_frozen():
    config = ConfigValidator().validate(
        ReseedOptions(netdb="/var/netDb", signer="me@mail.i2p")
    )
    with pytest.raises(ValueError):
        config.port = 80
