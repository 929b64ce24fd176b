from src.hourtracker.services.audit_service import (
    AuditChange,
    AuditService,
    AuditSink,
    NullAuditSink,
)
from src.hourtracker.services.batch import BatchInsertCoordinator
from src.hourtracker.services.foreign_keys import ForeignKeyResolver, RepositoryForeignKeyResolver
from src.hourtracker.services.overlap import OverlapValidator, intervals_overlap
from src.hourtracker.services.time_entry_service import TimeEntryService

__all__ = [
    "AuditChange",
    "AuditService",
    "AuditSink",
    "BatchInsertCoordinator",
    "ForeignKeyResolver",
    "NullAuditSink",
    "OverlapValidator",
    "RepositoryForeignKeyResolver",
    "TimeEntryService",
    "intervals_overlap",
]
