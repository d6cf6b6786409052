"""SQLAlchemy models for the API sync service.

This package re-exports all models so that ``from src.core.models import X``
works and importing the package registers every table with Base.metadata.
"""

from src.core.models.sync import ApiConfiguration, SyncedUser

__all__ = [
    "ApiConfiguration",
    "SyncedUser",
]
