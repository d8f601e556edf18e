"""Backend interface and implementations."""

from flowcatalog.backend.base import Backend, BackendFault, EntityNotFoundError
from flowcatalog.backend.snapshot import SnapshotBackend

__all__ = ["Backend", "BackendFault", "EntityNotFoundError", "SnapshotBackend"]
