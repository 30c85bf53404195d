from pathlib import Path

import pytest
from click.testing import CliRunner

from reseeder import cli as cli_module
from reseeder.cli import cli
from reseeder.common.exceptions import ServeError
from reseeder.common.models import ReseedOptions

TEST_KEY_SIZE = 2048


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[ReseedOptions]:
    calls: list[ReseedOptions] = []
    monkeypatch.setattr(cli_module, "start_server", calls.append)
    return calls


@pytest.fixture
def small_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module.DEFAULTS, "SIGNING_KEY_SIZE", TEST_KEY_SIZE)


def test_cli_help():
    """Test CLI help command."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "reseed" in result.output
    assert "keygen" in result.output


def test_cli_reseed_help():
    runner = CliRunner()
    result = runner.invoke(cli, ["reseed", "--help"])
    assert result.exit_code == 0
    assert "--tlsHost" in result.output
    assert "--singleOnion" in result.output


def test_reseed_passes_options(captured, workdir):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "reseed",
            "--netdb", "netDb",
            "--signer", "me@mail.i2p",
            "--tlsHost", "reseed.example.org",
            "--numRi", "50",
            "--interval", "12h",
            "--trustProxy",
        ],
    )

    assert result.exit_code == 0, result.output
    (options,) = captured
    assert options.netdb == "netDb"
    assert options.signer == "me@mail.i2p"
    assert options.tls_host == "reseed.example.org"
    assert options.num_ri == 50
    assert options.interval == "12h"
    assert options.trust_proxy is True
    assert options.onion is False
    assert options.onion_tls is True
    assert options.port == 8443


def test_reseed_onion_flags(captured, workdir):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["reseed", "--netdb", "n", "--signer", "s", "--onion", "--singleOnion", "--no-onionTLS"],
    )

    assert result.exit_code == 0, result.output
    (options,) = captured
    assert options.onion is True
    assert options.single_onion is True
    assert options.onion_tls is False


def test_reseed_missing_netdb(workdir, written_files):
    runner = CliRunner()
    result = runner.invoke(cli, ["reseed", "--signer", "me@mail.i2p"])

    assert result.exit_code == 1
    assert "--netdb is required" in result.output
    assert written_files() == set()


def test_reseed_missing_signer(workdir, netdb_dir, written_files):
    runner = CliRunner()
    result = runner.invoke(cli, ["reseed", "--netdb", str(netdb_dir)])

    assert result.exit_code == 1
    assert "--signer is required" in result.output
    assert written_files() == set()


def test_reseed_bad_interval(workdir, netdb_dir, written_files):
    runner = CliRunner()
    result = runner.invoke(
        cli, ["reseed", "--netdb", str(netdb_dir), "--signer", "me@mail.i2p", "--interval", "90x"]
    )

    assert result.exit_code == 1
    assert "'90x' is not a valid time interval" in result.output
    assert written_files() == set()


def test_reseed_interval_out_of_range(workdir, netdb_dir, written_files):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["reseed", "--netdb", str(netdb_dir), "--signer", "me@mail.i2p", "--interval", "9999999999999h"],
    )

    assert result.exit_code == 1
    assert "not a valid time interval" in result.output
    assert written_files() == set()


def test_reseed_serve_failure_exit_code(monkeypatch, workdir):
    def fail(options):
        raise ServeError("HTTPS listener on 0.0.0.0:8443 failed to start")

    monkeypatch.setattr(cli_module, "start_server", fail)
    runner = CliRunner()
    result = runner.invoke(cli, ["reseed", "--netdb", "n", "--signer", "s"])

    assert result.exit_code == 2
    assert "failed to start" in result.output


def test_keygen_creates_signing_material(small_keys, workdir):
    runner = CliRunner()
    result = runner.invoke(cli, ["keygen", "--signer", "me@mail.i2p"])

    assert result.exit_code == 0, result.output
    assert "Signing key: me_at_mail.i2p.pem" in result.output
    assert Path("me_at_mail.i2p.pem").exists()
    assert Path("me_at_mail.i2p.crt").exists()
    assert not Path("onion.key").exists()


def test_keygen_reuses_existing_key(small_keys, workdir, signing_key_pem):
    key_path = Path("custom.pem")
    key_path.write_bytes(signing_key_pem)

    runner = CliRunner()
    result = runner.invoke(cli, ["keygen", "--signer", "me@mail.i2p", "--key", str(key_path)])

    assert result.exit_code == 0, result.output
    assert key_path.read_bytes() == signing_key_pem
    assert Path("custom.crt").exists()


def test_keygen_with_tls_host(small_keys, workdir):
    runner = CliRunner()
    result = runner.invoke(
        cli, ["keygen", "--signer", "me@mail.i2p", "--tlsHost", "reseed.example.org"]
    )

    assert result.exit_code == 0, result.output
    assert "TLS certificate: reseed.example.org.crt" in result.output
    assert Path("reseed.example.org.crt").exists()
    assert Path("reseed.example.org.pem").exists()


def test_keygen_rejects_unreadable_key(small_keys, workdir):
    Path("broken.pem").write_text("not a key")

    runner = CliRunner()
    result = runner.invoke(cli, ["keygen", "--signer", "me@mail.i2p", "--key", "broken.pem"])

    assert result.exit_code == 2
