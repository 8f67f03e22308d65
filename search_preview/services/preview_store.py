"""Short-lived storage of built previews under opaque handles."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import Settings
from ..exceptions import PreviewNotFoundError
from ..models.preview_handle import PreviewHandle
from .preview_record import PreviewRecord

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timezone-aware columns back as naive datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PreviewStore:
    """Keeps preview records for as long as their index lives."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def save(self, record: PreviewRecord, now: Optional[datetime] = None) -> str:
        """Store *record* and return its handle."""
        now = now or datetime.now(timezone.utc)
        handle = uuid.uuid4().hex

        self.db.add(PreviewHandle(
            handle=handle,
            record=record.to_dict(),
            index_name=record.index_name,
            created_at=now,
            expires_at=now + timedelta(seconds=self.settings.preview_expire),
        ))
        self.db.commit()

        logger.debug(f"Stored preview {handle}", extra={"index_name": record.index_name})
        return handle

    def get(self, handle: str, now: Optional[datetime] = None) -> PreviewRecord:
        """Look up a stored preview.

        Raises:
            PreviewNotFoundError: If the handle is unknown or expired.
        """
        now = now or datetime.now(timezone.utc)
        row = self.db.query(PreviewHandle).filter(PreviewHandle.handle == handle).first()
        if row is None or _as_utc(row.expires_at) <= now:
            raise PreviewNotFoundError(handle)
        return PreviewRecord.from_dict(row.record)

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Delete expired handles. Returns the number removed."""
        now = now or datetime.now(timezone.utc)
        # Compare naive on SQLite, aware elsewhere.
        cutoff = _as_utc(now)
        if self.db.get_bind().dialect.name == "sqlite":
            cutoff = cutoff.astimezone(timezone.utc).replace(tzinfo=None)
        count = (
            self.db.query(PreviewHandle)
            .filter(PreviewHandle.expires_at <= cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if count:
            logger.info(f"Purged {count} expired preview handles")
        return count
