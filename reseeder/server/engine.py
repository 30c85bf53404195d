"""
Rebuilds record bundles from the netDb on a fixed interval.
"""

from __future__ import annotations

import logging
import random
import threading
from datetime import timedelta  # noqa: TC003
from typing import TYPE_CHECKING

from reseeder.common.duration import format_duration
from reseeder.common.runner import PeriodicRunner

if TYPE_CHECKING:
    from reseeder.common.interfaces import INetDb
    from reseeder.common.models import RouterInfo, SigningIdentity

logger = logging.getLogger(__name__)


class ReseedEngine:
    """Keeps a cache of record bundles fresh for the routes to hand out.

    Bundle serialization and signing belong to the su3 layer; this engine
    only owns the signing identity and decides which records go together.
    """

    def __init__(  # noqa: PLR0913
        self,
        netdb: INetDb,
        signing: SigningIdentity,
        num_ri: int,
        num_su3: int,
        rebuild_interval: timedelta,
        rng: random.Random | None = None,
    ):
        self.netdb = netdb
        self.signing = signing
        self.num_ri = num_ri
        self.num_su3 = num_su3
        self.rebuild_interval = rebuild_interval
        self.rng = rng or random.SystemRandom()
        self._lock = threading.Lock()
        self._bundles: list[list[RouterInfo]] = []
        self._record_count = 0
        self._runner = PeriodicRunner(
            "reseed-rebuild", rebuild_interval, self.rebuild, run_immediately=True
        )

    @property
    def bundles(self) -> list[list[RouterInfo]]:
        with self._lock:
            return list(self._bundles)

    def bundle_count(self) -> int:
        """Return how many bundles the next rebuild produces."""
        if self.num_su3 > 0:
            return self.num_su3
        return max(1, self._record_count // self.num_ri)

    def rebuild(self) -> None:
        records = self.netdb.routerinfos()
        self._record_count = len(records)
        bundles: list[list[RouterInfo]] = []
        if len(records) >= self.num_ri:
            bundles = [
                self.rng.sample(records, self.num_ri)
                for _ in range(self.bundle_count())
            ]
        else:
            logger.warning(
                "Only %d routerInfos available, need %d per bundle",
                len(records),
                self.num_ri,
            )

        with self._lock:
            self._bundles = bundles
        logger.info(
            "Rebuilt %d bundles from %d routerInfos for %s",
            len(bundles),
            len(records),
            self.signing.signer_id,
        )

    def start(self) -> None:
        logger.info(
            "Rebuilding bundles every %s", format_duration(self.rebuild_interval)
        )
        self._runner.start()

    def stop(self) -> None:
        self._runner.stop()
