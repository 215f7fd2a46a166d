"""
Base Repository

This module provides a generic base repository with common CRUD operations.
All entity-specific repositories inherit from this class.

What This Provides:
===================
- get(id)         → Fetch single record by primary key (None if absent)
- get_by_ids()    → Fetch multiple records by primary keys
- count()         → Count records with filtering
- exists()        → Check if record exists
- create()        → INSERT one row
- create_many()   → INSERT many rows in one statement, RETURNING all
- update()        → UPDATE ... RETURNING the row
- delete()        → DELETE ... RETURNING the row (database cascades apply)
- soft_delete()   → Set deleted_at (row retained)
- restore()       → Clear deleted_at
- list()          → List records with pagination and filtering

Generic Type Pattern:
=====================
    class UserRepository(BaseRepository[User]):
        pass

    repo = UserRepository(session)
    user = await repo.get(id)  # Returns User, not Any!

Mutations and RETURNING:
========================
┌─────────────────────────────────────────────────────────────────────────────┐
│                        MUTATIONS                                            │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   CREATE (one row, unit of work):                                           │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │ instance = Model(**kwargs)   # Python-side defaults (id)    │          │
│   │ session.add(instance)                                       │          │
│   │ await session.flush()        # INSERT                       │          │
│   │ await session.refresh()      # server defaults (created_at) │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                                                                             │
│   CREATE MANY / UPDATE / DELETE (single statement):                         │
│   ┌─────────────────────────────────────────────────────────────┐          │
│   │ stmt = insert|update|delete(Model)...returning(Model)       │          │
│   │ await session.scalars(stmt, populate_existing=True)         │          │
│   └─────────────────────────────────────────────────────────────┘          │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

populate_existing makes rows already present in the session's identity map
take the values returned by the statement.

flush() vs commit():
====================
Repositories never commit. The caller's scope (session_scope(),
transaction() or a service's nested scope) decides when work is committed.
Constraint violations raise sqlalchemy.exc.IntegrityError unchanged.
"""

from typing import Any, Generic, Iterable, Mapping, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.base import Executable
from sqlalchemy.sql.functions import count as sql_count

from pgblog.models.base import Base


# TypeVar bound to Base ensures we only work with SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)

RETURNING_OPTIONS = {"populate_existing": True}


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameter:
        ModelType: The SQLAlchemy model class this repository manages

    Attributes:
        model: The SQLAlchemy model class
        session: The async database session
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession) -> None:
        """
        Initialize the repository.

        Args:
            model: SQLAlchemy model class (e.g., User, Post)
            session: Async database session
        """
        self.model = model
        self.session = session

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════════════════════

    def _apply_filters(self, query: Any, filters: Optional[Mapping[str, Any]]) -> Any:
        """Add WHERE field = value for every known column in filters."""
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)
        return query

    async def _returning_one(self, stmt: Executable) -> Optional[ModelType]:
        """Execute a DML ... RETURNING statement affecting at most one row."""
        result = await self.session.scalars(stmt, execution_options=RETURNING_OPTIONS)
        return result.one_or_none()

    async def _returning_all(self, stmt: Executable) -> list[ModelType]:
        """Execute a DML ... RETURNING statement affecting any number of rows."""
        result = await self.session.scalars(stmt, execution_options=RETURNING_OPTIONS)
        return list(result.all())

    # ═══════════════════════════════════════════════════════════════════════════
    # READ OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get(self, record_id: UUID) -> Optional[ModelType]:
        """
        Get a single record by its primary key.

        Args:
            record_id: The UUID of the record to fetch

        Returns:
            The model instance if found, None otherwise

        SQL Generated:
            SELECT * FROM users WHERE id = '01890a5d-...'
        """
        result = await self.session.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: Sequence[UUID]) -> list[ModelType]:
        """
        Get multiple records by their primary keys.

        Args:
            ids: UUIDs to fetch

        Returns:
            Model instances (may be fewer than requested if some not found)

        SQL Generated:
            SELECT * FROM users WHERE id IN ('uuid1', 'uuid2', 'uuid3')
        """
        if not ids:
            return []

        result = await self.session.execute(select(self.model).where(self.model.id.in_(ids)))
        return list(result.scalars().all())

    async def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        """
        Count records with optional equality filtering.

        SQL Generated:
            SELECT COUNT(*) FROM users
        """
        query = self._apply_filters(select(sql_count()).select_from(self.model), filters)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def exists(self, record_id: UUID) -> bool:
        """Check if a record exists without loading it."""
        result = await self.session.execute(
            select(sql_count()).select_from(self.model).where(self.model.id == record_id)
        )
        return (result.scalar() or 0) > 0

    # ═══════════════════════════════════════════════════════════════════════════
    # CREATE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Field values for the new record

        Returns:
            The created model instance with all DB-generated values

        Raises:
            IntegrityError: On unique / foreign-key / not-null violation
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def create_many(self, rows: Iterable[Mapping[str, Any]]) -> list[ModelType]:
        """
        Insert several records in a single INSERT ... RETURNING.

        Args:
            rows: One mapping of column values per record

        Returns:
            Created instances, in input order

        SQL Generated:
            INSERT INTO users (id, email, name) VALUES (...), (...) RETURNING *
        """
        values = [dict(row) for row in rows]
        if not values:
            return []

        result = await self.session.scalars(
            insert(self.model).returning(self.model, sort_by_parameter_order=True),
            values,
        )
        return list(result.all())

    # ═══════════════════════════════════════════════════════════════════════════
    # UPDATE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def update(self, record_id: UUID, **kwargs: Any) -> Optional[ModelType]:
        """
        Update a record by ID.

        Only fields that are provided and not None are written.

        Args:
            record_id: UUID of the record to update
            **kwargs: Fields to update (None values are ignored)

        Returns:
            Updated model instance, or None if not found

        SQL Generated:
            UPDATE users SET name = 'Alicia', updated_at = now()
            WHERE id = '...' RETURNING *
        """
        values = {
            field: value
            for field, value in kwargs.items()
            if hasattr(self.model, field) and value is not None
        }
        if not values:
            return await self.get(record_id)

        stmt = (
            update(self.model)
            .where(self.model.id == record_id)
            .values(**values)
            .returning(self.model)
        )
        return await self._returning_one(stmt)

    # ═══════════════════════════════════════════════════════════════════════════
    # DELETE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def delete(self, record_id: UUID) -> Optional[ModelType]:
        """
        Hard delete a record by ID.

        Dependent rows are removed by the ON DELETE CASCADE foreign keys.

        Returns:
            The deleted row, or None if not found

        SQL Generated:
            DELETE FROM users WHERE id = '...' RETURNING *
        """
        stmt = delete(self.model).where(self.model.id == record_id).returning(self.model)
        return await self._returning_one(stmt)

    async def soft_delete(self, record_id: UUID) -> Optional[ModelType]:
        """
        Soft delete a record by setting its deleted_at timestamp.

        The row stays in the table and remains retrievable by id.
        Only works on models using SoftDeleteMixin.

        Returns:
            Updated model instance, or None if not found or not soft-deletable

        SQL Generated:
            UPDATE users SET deleted_at = now() WHERE id = '...' RETURNING *
        """
        return await self._set_deleted_at(record_id, func.now())

    async def restore(self, record_id: UUID) -> Optional[ModelType]:
        """
        Restore a soft-deleted record by clearing deleted_at.

        SQL Generated:
            UPDATE users SET deleted_at = NULL WHERE id = '...' RETURNING *
        """
        return await self._set_deleted_at(record_id, None)

    async def _set_deleted_at(self, record_id: UUID, value: Any) -> Optional[ModelType]:
        if not hasattr(self.model, "deleted_at"):
            return None

        stmt = (
            update(self.model)
            .where(self.model.id == record_id)
            .values(deleted_at=value)
            .returning(self.model)
        )
        return await self._returning_one(stmt)

    # ═══════════════════════════════════════════════════════════════════════════
    # LISTING
    # ═══════════════════════════════════════════════════════════════════════════

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 100,
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        order_desc: bool = True,
    ) -> list[ModelType]:
        """
        List records with pagination and optional filtering.

        Args:
            offset: Number of records to skip
            limit: Maximum records to return (default 100)
            filters: Dict of field=value for WHERE clauses
            order_by: Field name to order results by
            order_desc: If True, order descending; if False, ascending

        SQL Generated:
            SELECT * FROM posts
            ORDER BY created_at DESC
            OFFSET 20 LIMIT 20
        """
        query = self._apply_filters(select(self.model), filters)

        if order_by and hasattr(self.model, order_by):
            order_field = getattr(self.model, order_by)
            query = query.order_by(order_field.desc() if order_desc else order_field)

        query = query.offset(offset).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())
