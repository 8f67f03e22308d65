"""Stored preview handle model."""

from sqlalchemy import Column, String, JSON, DateTime
from sqlalchemy.sql import func
from ..database import Base


class PreviewHandle(Base):
    """
    Opaque handle under which a built preview is kept until it expires.

    The redirect endpoint looks the handle up and sends the viewer to the
    front-end application. Rows past ``expires_at`` are ignored on read and
    removed by the worker.
    """

    __tablename__ = "preview_handles"

    # Random hex token handed to the editor's browser
    handle = Column(String(64), primary_key=True)

    # Serialized PreviewRecord
    record = Column(JSON, nullable=False)

    # Index holding the previewed document (for diagnostics)
    index_name = Column(String(255), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
