"""
Serving subsystem: opens the single listener described by a ListenerPlan.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable

import stem
import stem.connection
import stem.process
import uvicorn
from stem.control import Controller

from reseeder.common.exceptions import ServeError

from .engine import ReseedEngine
from .netdb import LocalNetDb
from .onion import tor_key_blob
from .routes import Blacklist, ReseedRoutes, create_app

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from fastapi import FastAPI

    from reseeder.common.models import ListenerPlan, ReseedConfig, SigningIdentity

logger = logging.getLogger(__name__)

ONION_LOCAL_HOST = "127.0.0.1"


class ReseedServer:
    """Default serving subsystem backed by uvicorn and, for onion modes, Tor."""

    def __init__(
        self,
        config: ReseedConfig,
        tor_launcher: Callable[..., Any] = stem.process.launch_tor_with_config,
        controller_factory: Callable[..., Controller] = Controller.from_port,
    ):
        self.config = config
        self.tor_launcher = tor_launcher
        self.controller_factory = controller_factory

    def start_serving(
        self, plan: ListenerPlan, signing: SigningIdentity, netdb_dir: Path
    ) -> None:
        """Serve until the listener stops. Raises ServeError on failure."""
        engine = ReseedEngine(
            LocalNetDb(netdb_dir),
            signing,
            num_ri=self.config.num_ri,
            num_su3=self.config.num_su3,
            rebuild_interval=self.config.rebuild_interval,
        )
        app = create_app(
            ReseedRoutes(
                engine,
                plan.mode,
                blacklist=self._load_blacklist(),
                trust_proxy=self.config.trust_proxy,
                prefix=self.config.prefix,
            )
        )

        engine.start()
        try:
            if plan.mode.uses_onion:
                with self.onion_service(plan):
                    self.serve(app, plan, ONION_LOCAL_HOST)
            else:
                self.serve(app, plan, plan.bind_ip)
        finally:
            engine.stop()

    def _load_blacklist(self) -> Blacklist:
        blacklist = Blacklist()
        if self.config.blacklist_path:
            try:
                blacklist.load_file(self.config.blacklist_path)
            except OSError as e:
                logger.warning(
                    "Unable to load blacklist %s: %s", self.config.blacklist_path, e
                )
        return blacklist

    def serve(self, app: FastAPI, plan: ListenerPlan, host: str) -> None:
        kwargs: dict[str, Any] = {}
        if plan.mode.uses_tls and plan.tls_identity is not None:
            kwargs["ssl_certfile"] = str(plan.tls_identity.cert_path)
            kwargs["ssl_keyfile"] = str(plan.tls_identity.key_path)
        scheme = "HTTPS" if kwargs else "HTTP"

        server = uvicorn.Server(
            uvicorn.Config(app, host=host, port=plan.port, log_config=None, **kwargs)
        )
        logger.info("%s server started on %s:%d", scheme, host, plan.port)
        try:
            server.run()
        except SystemExit as e:
            # uvicorn exits the interpreter when it cannot bind
            msg = f"{scheme} listener on {host}:{plan.port} failed to start"
            raise ServeError(msg) from e
        except OSError as e:
            msg = f"{scheme} listener on {host}:{plan.port} failed: {e}"
            raise ServeError(msg) from e
        if not server.started:
            msg = f"{scheme} listener on {host}:{plan.port} never started"
            raise ServeError(msg)

    def tor_config(self, plan: ListenerPlan, data_dir: str) -> dict[str, str]:
        tor_config = {
            "ControlPort": str(self.config.tor_control_port),
            "SocksPort": "0",
            "DataDirectory": data_dir,
        }
        if plan.single_hop:
            tor_config["HiddenServiceSingleHopMode"] = "1"
            tor_config["HiddenServiceNonAnonymousMode"] = "1"
        return tor_config

    @contextmanager
    def onion_service(self, plan: ListenerPlan) -> Iterator[str]:
        """Publish the plan's onion identity for the lifetime of the block."""
        identity = plan.onion_identity
        if identity is None:
            msg = f"{plan.mode.value} listener has no onion identity"
            raise ServeError(msg)

        with tempfile.TemporaryDirectory(prefix="reseeder-tor-") as data_dir:
            try:
                tor_process = self.tor_launcher(
                    config=self.tor_config(plan, data_dir), take_ownership=True
                )
            except OSError as e:
                msg = f"Unable to launch tor: {e}"
                raise ServeError(msg) from e

            try:
                with self.controller_factory(
                    port=self.config.tor_control_port
                ) as controller:
                    controller.authenticate()
                    response = controller.create_ephemeral_hidden_service(
                        {plan.onion_remote_port: f"{ONION_LOCAL_HOST}:{plan.port}"},
                        key_type="ED25519-V3",
                        key_content=tor_key_blob(identity.seed),
                        await_publication=True,
                    )
                    if response.service_id != identity.service_id:
                        msg = (
                            f"Tor published {response.service_id}.onion, "
                            f"expected {identity.hostname}"
                        )
                        raise ServeError(msg)

                    logger.info(
                        "Onion service %s listening on port %d%s",
                        identity.hostname,
                        plan.onion_remote_port,
                        " (single hop)" if plan.single_hop else "",
                    )
                    try:
                        yield identity.hostname
                    finally:
                        controller.remove_ephemeral_hidden_service(
                            response.service_id
                        )
            except (stem.ControllerError, stem.connection.AuthenticationFailure) as e:
                msg = f"Tor controller error: {e}"
                raise ServeError(msg) from e
            finally:
                tor_process.kill()
                tor_process.wait()
