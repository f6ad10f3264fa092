"""Listing-view invalidation signals.

Mutations bump a per-path version; listing endpoints expose the version as a
weak ETag so rendered views know to refetch.
"""

import logging
from collections import defaultdict

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"
TODOS_PATH = "/todos"


class ViewInvalidator:
    """In-process version counters for listing views."""

    def __init__(self) -> None:
        self._versions: dict[str, int] = defaultdict(int)

    def invalidate(self, path: str) -> int:
        self._versions[path] += 1
        logger.debug("view invalidated", extra={"path": path, "version": self._versions[path]})
        return self._versions[path]

    def version(self, path: str) -> int:
        return self._versions.get(path, 0)

    def etag(self, path: str) -> str:
        return f'W/"{path.strip("/") or "root"}-{self.version(path)}"'
