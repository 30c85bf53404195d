"""
Command-line interface for the I2P reseed server.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from reseeder.common import setup_logger
from reseeder.common.config import Config
from reseeder.common.exceptions import ConfigurationError, OperationalError
from reseeder.common.models import ReseedOptions
from reseeder.server import start_server
from reseeder.server.credentials import CredentialStore
from reseeder.server.validator import default_tls_paths, signer_file_name

logger = logging.getLogger("reseeder")

DEFAULTS = Config()


class FatalError(click.ClickException):
    """Operational failure after startup began; exits with status 2."""

    exit_code = 2


@click.group()
def cli() -> None:
    """I2P reseed server"""
    setup_logger(logger, DEFAULTS)


@cli.command()
@click.option("--signer", default=None, help="Your su3 signing ID (ex. something@mail.i2p)")
@click.option("--tlsHost", "tls_host", default=None, help="The public hostname used on your TLS certificate")
@click.option("--onion", is_flag=True, help="Present an onionv3 address")
@click.option("--singleOnion", "single_onion", is_flag=True, help="Use a faster, but non-anonymous single-hop onion")
@click.option("--onionKey", "onion_key", default=DEFAULTS.DEFAULT_ONION_KEY, show_default=True, help="Path to the raw ed25519 private key seed for the onion")
@click.option("--onionTLS/--no-onionTLS", "onion_tls", default=True, show_default=True, help="Serve TLS on the onion address when no --tlsHost is given")
@click.option("--key", default=None, help="Path to your su3 signing private key")
@click.option("--netdb", default=None, help="Path to NetDB directory containing routerInfos")
@click.option("--tlsCert", "tls_cert", default=None, help="Path to a TLS certificate")
@click.option("--tlsKey", "tls_key", default=None, help="Path to a TLS private key")
@click.option("--ip", default=DEFAULTS.DEFAULT_IP, show_default=True, help="IP address to listen on")
@click.option("--port", default=DEFAULTS.DEFAULT_PORT, type=int, show_default=True, help="Port to listen on")
@click.option("--numRi", "num_ri", default=DEFAULTS.DEFAULT_NUM_RI, type=int, show_default=True, help="Number of routerInfos to include in each su3 file")
@click.option("--numSu3", "num_su3", default=DEFAULTS.DEFAULT_NUM_SU3, type=int, show_default=True, help="Number of su3 files to build (0 = automatic based on size of netdb)")
@click.option("--interval", default=DEFAULTS.DEFAULT_INTERVAL, show_default=True, help="Duration between SU3 cache rebuilds (ex. 12h, 15m)")
@click.option("--prefix", default="", help="Prefix path for the HTTP(S) server (ex. /netdb)")
@click.option("--trustProxy", "trust_proxy", is_flag=True, help="Trust the 'X-Forwarded-For' header in requests (ex. behind cloudflare)")
@click.option("--blacklist", default=None, help="Path to a txt file containing a list of IPs to deny connections from")
@click.option("--stats", default=DEFAULTS.DEFAULT_STATS_INTERVAL, show_default=True, help="Periodically print memory stats (ex. 30s, 0 = off)")
@click.option("--torControlPort", "tor_control_port", default=DEFAULTS.TOR_CONTROL_PORT, type=int, show_default=True, help="Control port for the tor process used by --onion")
def reseed(**kwargs: object) -> None:
    """Start a reseed server"""
    options = ReseedOptions(**kwargs)
    try:
        start_server(options)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    except OperationalError as e:
        logger.error("Reseed server stopped: %s", e)  # noqa: TRY400
        raise FatalError(str(e)) from e


@cli.command()
@click.option("--signer", required=True, help="Your su3 signing ID (ex. something@mail.i2p)")
@click.option("--key", default=None, help="Path for the su3 signing private key")
@click.option("--tlsHost", "tls_host", default=None, help="Also provision a TLS certificate for this hostname")
@click.option("--tlsCert", "tls_cert", default=None, help="Path for the TLS certificate")
@click.option("--tlsKey", "tls_key", default=None, help="Path for the TLS private key")
def keygen(
    signer: str,
    key: str | None,
    tls_host: str | None,
    tls_cert: str | None,
    tls_key: str | None,
) -> None:
    """Provision signing and TLS credentials without serving"""
    store = CredentialStore(config=DEFAULTS)
    key_path = Path(key or signer_file_name(signer) + DEFAULTS.SIGNING_KEY_EXTENSION)
    try:
        signing = store.load_or_create_signing_identity(key_path, signer)
        cert_path = store.export_signer_certificate(signing)
        click.echo(f"Signing key: {key_path}")
        click.echo(f"Signer certificate: {cert_path}")

        if tls_host:
            default_cert, default_key = default_tls_paths(tls_host, DEFAULTS)
            tls = store.load_or_create_tls_identity(
                tls_host,
                Path(tls_cert) if tls_cert else default_cert,
                Path(tls_key) if tls_key else default_key,
            )
            click.echo(f"TLS certificate: {tls.cert_path}")
            click.echo(f"TLS key: {tls.key_path}")
    except OperationalError as e:
        raise FatalError(str(e)) from e


if __name__ == "__main__":
    cli()
