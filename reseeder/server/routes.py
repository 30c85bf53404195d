"""
Routes for the reseed server.
"""

from __future__ import annotations

import ipaddress
import logging
import time
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.responses import Response

    from reseeder.common.models import ListenerMode
    from reseeder.server.engine import ReseedEngine

logger = logging.getLogger(__name__)


class Blacklist:
    """Set of client IPs that are refused service."""

    def __init__(self, addresses: set[str] | None = None):
        self.addresses: set[str] = set(addresses or ())

    def load_file(self, path: Path) -> None:
        """Add one IP per line from ``path``; blank lines and ``#`` comments are skipped."""
        with path.open() as f:
            for line in f:
                entry = line.split("#", 1)[0].strip()
                if not entry:
                    continue
                try:
                    self.addresses.add(str(ipaddress.ip_address(entry)))
                except ValueError:
                    logger.warning("Ignoring invalid blacklist entry %r", entry)
        logger.info("Loaded %d blacklisted addresses", len(self.addresses))

    def is_blocked(self, address: str | None) -> bool:
        return address is not None and address in self.addresses


class ReseedRoutes:
    """Handles FastAPI routes for the reseed server."""

    def __init__(
        self,
        engine: ReseedEngine,
        mode: ListenerMode,
        blacklist: Blacklist | None = None,
        trust_proxy: bool = False,  # noqa: FBT001, FBT002
        prefix: str = "",
    ):
        self.engine = engine
        self.mode = mode
        self.blacklist = blacklist or Blacklist()
        self.trust_proxy = trust_proxy
        self.prefix = prefix

    def setup_routes(self, app: FastAPI) -> None:
        """Setup API routes on the FastAPI app."""
        app.middleware("http")(self.deny_blacklisted)
        app.get(f"{self.prefix}/health")(self.health)

    def client_address(self, request: Request) -> str | None:
        if self.trust_proxy:
            forwarded = request.headers.get("x-forwarded-for")
            if forwarded:
                return forwarded.split(",", 1)[0].strip()
        return request.client.host if request.client else None

    async def deny_blacklisted(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        address = self.client_address(request)
        if self.blacklist.is_blocked(address):
            logger.info("Refused blacklisted client %s", address)
            return JSONResponse({"detail": "forbidden"}, status_code=403)
        return await call_next(request)

    async def health(self) -> dict[str, Any]:
        """Handle /health endpoint."""
        return {
            "status": "ok",
            "mode": self.mode.value,
            "bundles": len(self.engine.bundles),
            "timestamp": int(time.time()),
        }


def create_app(routes: ReseedRoutes) -> FastAPI:
    app = FastAPI()
    routes.setup_routes(app)
    return app
