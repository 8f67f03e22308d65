"""Garbage collection of expired preview indices.

Preview indices are never deleted by the code that creates them. A scheduler
(see ``search_preview.worker``) calls ``PreviewGarbageCollector.collect``
periodically; every preview index created more than ``preview_expire``
seconds ago is deleted.
"""

import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from opensearchpy import OpenSearch

from ..core.config import Settings
from ..core.search_client import remote_call
from ..exceptions import RemoteError

logger = logging.getLogger(__name__)


def parse_creation_time(row: Dict[str, Any]) -> Optional[float]:
    """Creation time of a ``_cat/indices`` row as a UNIX timestamp.

    Prefers the epoch-millis ``creation.date`` column and falls back to the
    ISO 8601 ``creation.date.string`` column.
    """
    millis = row.get("creation.date")
    if millis not in (None, ""):
        try:
            return int(millis) / 1000.0
        except (TypeError, ValueError):
            pass

    text = row.get("creation.date.string")
    if text:
        try:
            return datetime.fromisoformat(str(text).replace("Z", "+00:00")).timestamp()
        except ValueError:
            pass

    return None


class PreviewGarbageCollector:
    """Deletes preview indices older than the configured expiration."""

    # Indices deleted per request; keeps the request line short.
    BATCH_SIZE = 10

    def __init__(self, client: OpenSearch, settings: Settings):
        self.client = client
        self.settings = settings

    def get_index_pattern(self) -> str:
        return f"{self.settings.preview_index_prefix}-*"

    def get_preview_indices(self) -> List[Dict[str, Any]]:
        """All preview indices with their creation date, oldest first.

        Raises:
            RemoteError: If the listing fails.
        """
        pattern = self.get_index_pattern()
        with remote_call("cat.indices", index_name=pattern):
            rows = self.client.cat.indices(
                index=pattern,
                h="i,creation.date,creation.date.string",
                s="creation.date",
                format="json",
            )
        return list(rows or [])

    def get_expired_preview_indices(self, now: Optional[float] = None) -> List[str]:
        """Names of preview indices created at or before ``now - preview_expire``.

        Args:
            now: Current UNIX timestamp (injectable for testing). Defaults to ``time.time()``.
        """
        if now is None:
            now = time.time()
        cutoff = now - self.settings.preview_expire

        expired: List[str] = []
        for row in self.get_preview_indices():
            name = row.get("i") or row.get("index")
            created = parse_creation_time(row)
            if not name:
                continue
            if created is None:
                logger.warning(
                    f"Cannot read creation date of {name}",
                    extra={"index_name": name},
                )
                continue
            if created <= cutoff:
                expired.append(name)

        return expired

    def collect(self, now: Optional[float] = None) -> None:
        """Delete expired preview indices in batches of ``BATCH_SIZE``.

        A failed batch is logged and the remaining batches are still sent.
        """
        try:
            expired = self.get_expired_preview_indices(now)
        except RemoteError as e:
            logger.error(f"Listing preview indices failed: {e.message}", extra=e.details)
            return

        if not expired:
            logger.debug("No expired preview indices")
            return

        deleted = 0
        for start in range(0, len(expired), self.BATCH_SIZE):
            batch = expired[start:start + self.BATCH_SIZE]
            index_names = ",".join(batch)
            try:
                with remote_call("indices.delete", index_name=index_names):
                    self.client.indices.delete(index=index_names, ignore_unavailable=True)
                deleted += len(batch)
            except RemoteError as e:
                logger.error(f"Deleting preview indices failed: {e.message}", extra=e.details)

        logger.info(
            f"Deleted {deleted} of {len(expired)} expired preview indices",
            extra={"deleted": deleted, "expired": len(expired)},
        )
