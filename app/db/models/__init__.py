"""
Database models.
"""

from app.db.models.resource import Resource, ResourceStatus

__all__ = [
    "Resource",
    "ResourceStatus",
]
