from src.hourtracker.schemas.catalog import (
    ClientCreate,
    ClientUpdate,
    ProjectCreate,
    ProjectUpdate,
    TaskCreate,
    TaskUpdate,
    TenantCreate,
    UserCreate,
)
from src.hourtracker.schemas.pagination import Page, PageRequest
from src.hourtracker.schemas.time_entry import (
    ProjectMinutesSummary,
    TimeEntryCandidate,
    TimeEntryDetailed,
    TimeEntryFilters,
    TimeEntryRead,
    TimeEntryUpdate,
)

__all__ = [
    # Catalog
    "ClientCreate",
    "ClientUpdate",
    "ProjectCreate",
    "ProjectUpdate",
    "TaskCreate",
    "TaskUpdate",
    "TenantCreate",
    "UserCreate",
    # Pagination
    "Page",
    "PageRequest",
    # Time entries
    "ProjectMinutesSummary",
    "TimeEntryCandidate",
    "TimeEntryDetailed",
    "TimeEntryFilters",
    "TimeEntryRead",
    "TimeEntryUpdate",
]
