"""
Interfaces and protocols for the collaborators the bootstrap hands off to.
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Any, Protocol

from reseeder.common.models import ListenerPlan, RouterInfo, SigningIdentity


class ICertificateIssuer(Protocol):
    """Protocol for minting self-signed certificates."""

    def issue_self_signed_certificate(self, host: str) -> tuple[bytes, bytes]: ...

    def issue_signer_certificate(self, signer_id: str, private_key: Any) -> bytes: ...


class IServingSubsystem(Protocol):
    """Protocol for the subsystem that owns the listener once started."""

    def start_serving(
        self, plan: ListenerPlan, signing: SigningIdentity, netdb_dir: Path
    ) -> None: ...


class INetDb(Protocol):
    """Protocol for the directory-backed record source."""

    def routerinfos(self) -> list[RouterInfo]: ...


class IReseedEngine(Protocol):
    """Protocol for the packaging engine that rebuilds bundles on a timer."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def rebuild(self) -> None: ...


class IPeriodicTask(Protocol):
    """Protocol for a background task with an explicit stop signal."""

    def start(self) -> None: ...

    def stop(self) -> None: ...
