"""User account use cases (profile data and role assignment, no credentials)."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from shop_api.db.models import User
from shop_api.domain.roles import RoleTable, UnknownRoleError, load_role_table
from shop_api.repositories.sql_repository import QueryResult, SQLRepository, UniqueViolation
from shop_api.services.errors import (
    DuplicateEmailError,
    DuplicateError,
    DuplicateUsernameError,
    NotFoundError,
)
from shop_api.services.uniqueness import UniquenessGuard

logger = logging.getLogger(__name__)

USER_FIELDS = ("username", "fullname", "dob", "address", "email", "role")


def user_to_dict(entity: User) -> dict:
    return {
        "id": entity.id,
        "username": entity.username,
        "fullname": entity.fullname,
        "dob": entity.dob.isoformat() if entity.dob else None,
        "address": entity.address,
        "email": entity.email,
        "role": entity.role,
        "createdAt": entity.created_at.isoformat() if entity.created_at else None,
        "updatedAt": entity.updated_at.isoformat() if entity.updated_at else None,
    }


def _duplicate_from(exc: UniqueViolation) -> DuplicateError:
    if "username" in exc.columns:
        return DuplicateUsernameError()
    return DuplicateEmailError()


class UserService:
    """Keeps emails and usernames unique and roles within the configured set."""

    def __init__(self, role_table: Optional[RoleTable] = None, repository: Optional[SQLRepository] = None) -> None:
        self.role_table = role_table or load_role_table()
        self.repository = repository or SQLRepository(User)
        self.email_guard = UniquenessGuard(self.repository, "email", DuplicateEmailError)
        self.username_guard = UniquenessGuard(self.repository, "username", DuplicateUsernameError)

    def normalize_email(self, value: str | None) -> str:
        return (value or "").strip().lower()

    def _check_role(self, role: str) -> str:
        if not self.role_table.is_known(role):
            raise UnknownRoleError(role)
        return role

    def _clean(self, body: Mapping[str, Any]) -> dict:
        values = {key: body[key] for key in USER_FIELDS if key in body}
        if "email" in values:
            values["email"] = self.normalize_email(values["email"])
        if "username" in values:
            values["username"] = (values["username"] or "").strip()
        if "role" in values:
            self._check_role(values["role"])
        return values

    def create(self, body: Mapping[str, Any]) -> User:
        values = self._clean(body)
        values.setdefault("role", self.role_table.roles[0])
        self.email_guard.ensure_available(values.get("email"))
        self.username_guard.ensure_available(values.get("username"))
        try:
            entity = self.repository.insert(**values)
        except UniqueViolation as exc:
            logger.warning("Concurrent insert for user %r rejected: %s", values.get("email"), exc)
            raise _duplicate_from(exc) from exc
        logger.info("Created user %s with role %s", entity.id, entity.role)
        return entity

    def query(self, filters: Mapping[str, Any] | None = None, options: Mapping[str, Any] | None = None) -> QueryResult:
        options = options or {}
        return self.repository.paginate(
            filters or {},
            sort_by=options.get("sortBy"),
            limit=options.get("limit"),
            page=options.get("page"),
        )

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.repository.find_by_id(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.repository.find_one(email=self.normalize_email(email))

    def update_by_id(self, user_id: str, patch: Mapping[str, Any]) -> User:
        entity = self.get_by_id(user_id)
        if not entity:
            raise NotFoundError("User not found")
        changes = self._clean(patch)
        if changes.get("email", entity.email) != entity.email:
            self.email_guard.ensure_available(changes["email"], exclude_id=entity.id)
        if changes.get("username", entity.username) != entity.username:
            self.username_guard.ensure_available(changes["username"], exclude_id=entity.id)
        if not changes:
            return entity
        try:
            saved = self.repository.save(entity.id, changes)
        except UniqueViolation as exc:
            logger.warning("Concurrent update of user %s rejected: %s", entity.id, exc)
            raise _duplicate_from(exc) from exc
        if saved is None:
            raise NotFoundError("User not found")
        logger.info("Updated user %s fields=%s", saved.id, sorted(changes))
        return saved

    def delete_by_id(self, user_id: str) -> User:
        entity = self.get_by_id(user_id)
        if not entity:
            raise NotFoundError("User not found")
        if not self.repository.remove(entity.id):
            raise NotFoundError("User not found")
        logger.info("Deleted user %s", entity.id)
        return entity
