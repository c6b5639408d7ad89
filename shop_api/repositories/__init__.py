"""
Persistence adapters.

Services depend on the repository interface (find/insert/save/remove/paginate)
rather than on SQLAlchemy sessions directly.
"""

from .sql_repository import (
    InvalidQueryError,
    QueryResult,
    SQLRepository,
    UniqueViolation,
)

__all__ = ["InvalidQueryError", "QueryResult", "SQLRepository", "UniqueViolation"]
