"""
Database model for resources.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.db.session import Base


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form SQLite stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ResourceStatus(str, Enum):
    """
    Enumeration of possible resource statuses.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    ARCHIVED = "archived"


class Resource(Base):
    """
    Database model for resources.
    """

    __tablename__ = "resources"
    # AUTOINCREMENT keeps SQLite from reusing the ids of deleted rows
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)
    status = Column(
        String(20),
        nullable=False,
        default=ResourceStatus.ACTIVE.value,
        server_default=ResourceStatus.ACTIVE.value,
        index=True,
    )

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Resource id={self.id} name={self.name!r} status={self.status}>"
