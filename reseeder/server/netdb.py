"""
Directory-backed netDb record source.
"""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003

from reseeder.common.models import RouterInfo

logger = logging.getLogger(__name__)

ROUTERINFO_GLOB = "r*/routerInfo-*.dat"


class LocalNetDb:
    """Reads routerInfo files from a local netDb directory."""

    def __init__(self, path: Path):
        self.path = path

    def routerinfos(self) -> list[RouterInfo]:
        """Return every readable routerInfo record, newest first."""
        records: list[RouterInfo] = []
        for file_path in self.path.glob(ROUTERINFO_GLOB):
            try:
                mod_time = file_path.stat().st_mtime
                data = file_path.read_bytes()
            except OSError as e:
                logger.warning("Skipping unreadable routerInfo %s: %s", file_path, e)
                continue
            records.append(RouterInfo(name=file_path.name, mod_time=mod_time, data=data))

        records.sort(key=lambda r: r.mod_time, reverse=True)
        logger.debug("Scanned %d routerInfos from %s", len(records), self.path)
        return records
