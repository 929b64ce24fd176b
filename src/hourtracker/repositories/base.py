"""Base repository enforcing tenant isolation and soft-delete visibility."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, cast
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import delete, func, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.hourtracker.core.exceptions import (
    HourTrackerError,
    NotFoundError,
    ReferentialError,
    ValidationError,
)
from src.hourtracker.models.base import utc_now
from src.hourtracker.models.enums import OrderDirection

# Columns the repository owns; callers can never write them
MANAGED_FIELDS = frozenset({"id", "tenant_id", "created_at", "updated_at", "deleted_at"})


@dataclass(frozen=True)
class RepositoryQueryOptions:
    """Pagination, ordering, and soft-delete filter for list queries."""

    limit: int | None = None
    offset: int | None = None
    order_by: str | None = None
    order_direction: OrderDirection | str = OrderDirection.ASC
    include_deleted: bool = False


class TenantScopedRepository[ModelType: SQLModel]:
    """Generic CRUD + soft delete over one tenant-owned table.

    Every statement is scoped to ``tenant_id``; soft-deleted rows are invisible
    unless a list query asks for them. A row in another tenant, a soft-deleted
    row, and a missing row all look the same to callers.

    Repositories handle data access only. Transaction control (commit)
    is done by the caller that owns the session.
    """

    model: type[ModelType]
    label: str = "Record"
    supports_soft_delete: bool = True
    required_fields: tuple[str, ...] = ()
    mutable_fields: frozenset[str] = frozenset()
    create_only_fields: frozenset[str] = frozenset()  # settable on create, fixed afterwards
    unique_fields: tuple[str, ...] = ()  # named when a unique constraint rejects a write
    sortable_columns: frozenset[str] = frozenset({"created_at", "updated_at"})
    default_order_by: str = "created_at"

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- query helpers -----------------------------------------------------

    def _scoped(self, query: Any, tenant_id: UUID, include_deleted: bool = False) -> Any:
        """Apply the tenant filter and, unless asked otherwise, the soft-delete filter."""
        query = query.where(self.model.tenant_id == tenant_id)  # type: ignore[attr-defined]
        if self.supports_soft_delete and not include_deleted:
            query = query.where(self.model.deleted_at.is_(None))  # type: ignore[attr-defined]
        return query

    def _order_column(self, order_by: str | None) -> Any:
        """Resolve order_by against the allow-list, falling back to the default column."""
        name = order_by if order_by in self.sortable_columns else self.default_order_by
        return getattr(self.model, name)

    @staticmethod
    def _direction(value: OrderDirection | str) -> OrderDirection:
        try:
            return OrderDirection(str(getattr(value, "value", value)).upper())
        except ValueError:
            return OrderDirection.ASC

    @staticmethod
    def _paginate(query: Any, limit: int | None, offset: int | None) -> Any:
        if limit is not None:
            if limit < 0:
                raise ValidationError("limit must not be negative", field="limit")
            query = query.limit(limit)
        if offset is not None:
            if offset < 0:
                raise ValidationError("offset must not be negative", field="offset")
            query = query.offset(offset)
        return query

    def _writable(
        self, data: Mapping[str, Any] | BaseModel, for_update: bool = False
    ) -> dict[str, Any]:
        """Extract the caller-supplied fields this repository lets callers write."""
        if isinstance(data, BaseModel):
            fields = data.model_dump(exclude_unset=True)
        else:
            fields = dict(data)

        allowed = self.mutable_fields if for_update else self.mutable_fields | self.create_only_fields
        writable: dict[str, Any] = {}
        for key, value in fields.items():
            if key in MANAGED_FIELDS:
                continue
            if key not in allowed:
                raise ValidationError(f"{key} is not a writable field", field=key)
            writable[key] = value
        return writable

    def _prepare_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Hook for derived columns on insert. Returns the fields to persist."""
        return fields

    def _prepare_update(self, entity: ModelType, fields: dict[str, Any]) -> dict[str, Any]:
        """Hook for derived columns on update, given the current row."""
        return fields

    def _not_found(self, id: UUID) -> NotFoundError:
        return NotFoundError(f"{self.label} {id} not found")

    def _constraint_error(self, e: IntegrityError, deleting: bool = False) -> HourTrackerError:
        """Map a constraint violation to the caller error it stands for.

        PostgreSQL reports a SQLSTATE; SQLite only a message.
        """
        detail = str(e.orig).upper()
        sqlstate = getattr(e.orig, "sqlstate", None)

        if sqlstate == "23503" or "FOREIGN KEY" in detail:
            if deleting:
                return ReferentialError(f"{self.label} is still referenced by other records.")
            return ReferentialError(f"{self.label} references a record that does not exist.")
        if sqlstate == "23505" or "UNIQUE" in detail:
            field = self.unique_fields[0] if self.unique_fields else None
            return ValidationError(
                f"{self.label} with this {field or 'value'} already exists.", field=field
            )
        return ValidationError(f"{self.label} violates a data constraint.")

    async def _flush(self) -> None:
        """Flush pending writes, reporting constraint violations as caller errors."""
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise self._constraint_error(e) from e

    # -- reads -------------------------------------------------------------

    async def find_by_tenant(
        self,
        tenant_id: UUID,
        options: RepositoryQueryOptions | None = None,
    ) -> list[ModelType]:
        """Return one ordered page of rows for a tenant. Empty list when nothing matches."""
        options = options or RepositoryQueryOptions()
        query = self._scoped(select(self.model), tenant_id, options.include_deleted)

        column = self._order_column(options.order_by)
        if self._direction(options.order_direction) is OrderDirection.DESC:
            query = query.order_by(column.desc(), self.model.id)  # type: ignore[attr-defined]
        else:
            query = query.order_by(column.asc(), self.model.id)  # type: ignore[attr-defined]

        query = self._paginate(query, options.limit, options.offset)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_id(self, id: UUID, tenant_id: UUID) -> ModelType | None:
        """Get an active row by primary key within the tenant, or None."""
        query = self._scoped(
            select(self.model).where(self.model.id == id),  # type: ignore[attr-defined]
            tenant_id,
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def exists(self, id: UUID, tenant_id: UUID) -> bool:
        """Check whether an active row with this id exists in the tenant."""
        query = self._scoped(
            select(self.model.id).where(self.model.id == id),  # type: ignore[attr-defined]
            tenant_id,
        )
        result = await self.session.execute(query)
        return result.first() is not None

    async def count(self, tenant_id: UUID, include_deleted: bool = False) -> int:
        """Count rows for a tenant."""
        query = self._scoped(
            select(func.count()).select_from(self.model),
            tenant_id,
            include_deleted,
        )
        result = await self.session.execute(query)
        return int(result.scalar_one())

    # -- writes ------------------------------------------------------------

    async def create(self, data: Mapping[str, Any] | BaseModel, tenant_id: UUID) -> ModelType:
        """Insert a new row owned by ``tenant_id``.

        id, tenant_id, created_at and updated_at are assigned here; any values
        the caller supplies for them are ignored.

        Raises:
            ValidationError: If a required field is absent, a field is not writable,
                or a unique constraint rejects the row
            ReferentialError: If a foreign key points at a missing row
        """
        fields = self._writable(data)
        for name in self.required_fields:
            if fields.get(name) is None:
                raise ValidationError(f"{name} is required", field=name)
        fields = self._prepare_create(fields)

        now = utc_now()
        entity = self.model(**fields, tenant_id=tenant_id, created_at=now, updated_at=now)
        self.session.add(entity)
        await self._flush()
        return entity

    async def update(
        self, id: UUID, data: Mapping[str, Any] | BaseModel, tenant_id: UUID
    ) -> ModelType:
        """Apply the supplied fields to an active row and refresh updated_at.

        Raises:
            ValidationError: If a field is not writable or a required field is nulled
            ReferentialError: If a foreign key points at a missing row
            NotFoundError: If no active row matches (id, tenant_id)
        """
        fields = self._writable(data, for_update=True)
        for name in self.required_fields:
            if name in fields and fields[name] is None:
                raise ValidationError(f"{name} cannot be null", field=name)

        entity = await self.find_by_id(id, tenant_id)
        if entity is None:
            raise self._not_found(id)
        fields = self._prepare_update(entity, fields)

        for name, value in fields.items():
            setattr(entity, name, value)
        entity.updated_at = utc_now()  # type: ignore[attr-defined]

        await self._flush()
        return entity

    async def soft_delete(self, id: UUID, tenant_id: UUID) -> None:
        """Mark an active row deleted. The transition is one-way.

        Raises:
            ValidationError: If the table has no soft-delete column
            NotFoundError: If the row is missing, already deleted, or in another tenant
        """
        if not self.supports_soft_delete:
            raise ValidationError(f"{self.label} does not support soft delete")

        now = utc_now()
        stmt = (
            update(self.model)
            .where(
                self.model.id == id,  # type: ignore[attr-defined]
                self.model.tenant_id == tenant_id,  # type: ignore[attr-defined]
                self.model.deleted_at.is_(None),  # type: ignore[attr-defined]
            )
            .values(deleted_at=now, updated_at=now)
        )
        result = await self.session.execute(stmt)
        if cast(CursorResult[Any], result).rowcount == 0:
            raise self._not_found(id)

    async def hard_delete(self, id: UUID, tenant_id: UUID) -> None:
        """Permanently remove a row. Only for tables without soft delete.

        Raises:
            ValidationError: If the table supports soft delete
            ReferentialError: If other rows still reference it
            NotFoundError: If no row matches (id, tenant_id)
        """
        if self.supports_soft_delete:
            raise ValidationError(f"{self.label} supports soft delete; use soft_delete")

        stmt = delete(self.model).where(
            self.model.id == id,  # type: ignore[attr-defined]
            self.model.tenant_id == tenant_id,  # type: ignore[attr-defined]
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            raise self._constraint_error(e, deleting=True) from e
        if cast(CursorResult[Any], result).rowcount == 0:
            raise self._not_found(id)
