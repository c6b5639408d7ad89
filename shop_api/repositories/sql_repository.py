"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
import math
import secrets
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, Mapping, Optional, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError

from shop_api.db.session import get_session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

DEFAULT_LIMIT = 10
DEFAULT_PAGE = 1

# API field names that differ from column names.
FIELD_ALIASES = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


class InvalidQueryError(ValueError):
    """Raised when a filter references a field the model does not have."""


class UniqueViolation(Exception):
    """Raised when the database rejects a write because of a unique constraint."""

    def __init__(self, message: str, columns: tuple[str, ...] = ()):
        super().__init__(message)
        self.columns = columns


@dataclass
class QueryResult(Generic[ModelT]):
    items: list[ModelT] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    total_pages: int = 0
    total_results: int = 0

    def to_dict(self, serialize) -> dict:
        return {
            "results": [serialize(item) for item in self.items],
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
            "totalResults": self.total_results,
        }


def new_id() -> str:
    return secrets.token_hex(12)


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _unique_violation(exc: IntegrityError, table: str) -> Optional[UniqueViolation]:
    """Translate driver specific unique errors (sqlite, postgres) into UniqueViolation."""
    message = str(getattr(exc, "orig", exc) or exc)
    lowered = message.lower()
    if "unique" not in lowered and "duplicate key" not in lowered:
        return None
    columns: list[str] = []
    # sqlite: "UNIQUE constraint failed: categories.title, categories.slug"
    if "constraint failed:" in lowered:
        tail = message.split(":", 1)[1]
        for part in tail.split(","):
            name = part.strip()
            if name.startswith(f"{table}."):
                columns.append(name[len(table) + 1 :])
    # postgres: 'duplicate key value violates unique constraint "categories_title_key"'
    elif '"' in message:
        constraint = message.split('"')[1]
        prefix, _, rest = constraint.partition("_")
        if prefix == table and rest.endswith("_key"):
            columns.append(rest[: -len("_key")])
    return UniqueViolation(message, tuple(columns))


class SQLRepository(Generic[ModelT]):
    """CRUD and pagination helpers for one mapped model."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model
        self.table = model.__tablename__

    # -------------------------- helpers --------------------------
    def _column(self, name: str):
        column_name = FIELD_ALIASES.get(name, name)
        return self.model.__table__.columns.get(column_name)

    def _conditions(self, filters: Mapping[str, Any]) -> list:
        conditions = []
        for name, value in filters.items():
            column = self._column(name)
            if column is None:
                raise InvalidQueryError(f"Unknown filter field: {name}")
            conditions.append(column == value)
        return conditions

    def _order_by(self, sort_by: str | None) -> list:
        clauses = []
        for chunk in (sort_by or "").split(","):
            name, _, direction = chunk.strip().partition(":")
            column = self._column(name.strip()) if name.strip() else None
            if column is None:
                # unknown sort fields are ignored
                continue
            clauses.append(column.desc() if direction.strip().lower() == "desc" else column.asc())
        if not clauses:
            clauses.append(self.model.created_at.asc())
        clauses.append(self.model.id.asc())
        return clauses

    @contextmanager
    def _writing(self, session):
        """Commit the enclosed statements, reporting unique violations as UniqueViolation."""
        try:
            yield
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            violation = _unique_violation(exc, self.table)
            if violation is None:
                raise
            logger.debug("Unique violation on %s %s", self.table, violation.columns)
            raise violation from exc

    # -------------------------- reads --------------------------
    def find_by_id(self, entity_id: str) -> Optional[ModelT]:
        with get_session() as session:
            return session.get(self.model, entity_id)

    def find_one(self, **filters: Any) -> Optional[ModelT]:
        with get_session() as session:
            stmt = select(self.model).where(*self._conditions(filters)).limit(1)
            return session.execute(stmt).scalars().first()

    def exists(self, filters: Mapping[str, Any], exclude_id: str | None = None) -> bool:
        with get_session() as session:
            stmt = select(self.model.id).where(*self._conditions(filters))
            if exclude_id is not None:
                stmt = stmt.where(self.model.id != exclude_id)
            return session.execute(stmt.limit(1)).first() is not None

    def paginate(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        sort_by: str | None = None,
        limit: Any = None,
        page: Any = None,
    ) -> QueryResult[ModelT]:
        limit_value = _positive_int(limit, DEFAULT_LIMIT)
        page_value = _positive_int(page, DEFAULT_PAGE)
        conditions = self._conditions(filters or {})
        with get_session() as session:
            count_stmt = select(func.count()).select_from(self.model).where(*conditions)
            total = session.execute(count_stmt).scalar_one()
            stmt = (
                select(self.model)
                .where(*conditions)
                .order_by(*self._order_by(sort_by))
                .offset((page_value - 1) * limit_value)
                .limit(limit_value)
            )
            items = list(session.execute(stmt).scalars().all())
        return QueryResult(
            items=items,
            page=page_value,
            limit=limit_value,
            total_pages=math.ceil(total / limit_value),
            total_results=total,
        )

    # -------------------------- writes --------------------------
    def insert(self, **fields: Any) -> ModelT:
        now = datetime.now(timezone.utc)
        entity = self.model(id=new_id(), created_at=now, updated_at=now, **fields)
        with get_session() as session:
            with self._writing(session):
                session.add(entity)
            session.refresh(entity)
            return entity

    def save(self, entity_id: str, values: Mapping[str, Any]) -> Optional[ModelT]:
        """Write all changed values in one UPDATE and return the stored row."""
        with get_session() as session:
            stmt = (
                update(self.model)
                .where(self.model.id == entity_id)
                .values(**values, updated_at=datetime.now(timezone.utc))
            )
            with self._writing(session):
                session.execute(stmt)
            return session.get(self.model, entity_id)

    def remove(self, entity_id: str) -> bool:
        with get_session() as session:
            result = session.execute(delete(self.model).where(self.model.id == entity_id))
            session.commit()
            return bool(result.rowcount)
