"""
Periodic process memory statistics.
"""

from __future__ import annotations

import gc
import logging
from datetime import timedelta  # noqa: TC003

import psutil

from reseeder.common.runner import PeriodicRunner

logger = logging.getLogger(__name__)


def memory_snapshot(process: psutil.Process | None = None) -> dict[str, int]:
    """Return current memory and garbage collector counters."""
    process = process or psutil.Process()
    info = process.memory_info()
    return {
        "rss_kb": info.rss // 1024,
        "vms_kb": info.vms // 1024,
        "objects": len(gc.get_objects()),
        "collections": sum(stat["collections"] for stat in gc.get_stats()),
    }


class MemoryStatsReporter(PeriodicRunner):
    """Logs a memory snapshot every ``interval`` until stopped."""

    def __init__(self, interval: timedelta):
        self.process = psutil.Process()
        super().__init__("memory-stats", interval, self.report)

    def report(self) -> None:
        stats = memory_snapshot(self.process)
        logger.info(
            "RSS: %d Kb, VMS: %d Kb, Objects: %d, NumGC: %d",
            stats["rss_kb"],
            stats["vms_kb"],
            stats["objects"],
            stats["collections"],
        )
