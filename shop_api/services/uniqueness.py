"""Advisory uniqueness checks run before every write."""
from __future__ import annotations

from typing import Any, Optional

from shop_api.repositories.sql_repository import SQLRepository
from shop_api.services.errors import DuplicateError


class UniquenessGuard:
    """
    Reports whether another live entity already holds a value for one field.

    The check is not atomic with the following write. The UNIQUE constraint on
    the column still rejects a concurrent duplicate, and services translate that
    rejection into the same error raised here.
    """

    def __init__(self, repository: SQLRepository, field: str, error: type[DuplicateError]) -> None:
        self.repository = repository
        self.field = field
        self.error = error

    def is_taken(self, value: Any, exclude_id: Optional[str] = None) -> bool:
        return self.repository.exists({self.field: value}, exclude_id=exclude_id)

    def ensure_available(self, value: Any, exclude_id: Optional[str] = None) -> None:
        if self.is_taken(value, exclude_id):
            raise self.error()
