"""Category use cases (create, query, update and delete by slug or id)."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from shop_api.db.models import Category
from shop_api.domain.slugs import derive_slug
from shop_api.repositories.sql_repository import QueryResult, SQLRepository, UniqueViolation
from shop_api.services.errors import DuplicateTitleError, NotFoundError
from shop_api.services.uniqueness import UniquenessGuard

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("title", "description")


def category_to_dict(entity: Category) -> dict:
    return {
        "id": entity.id,
        "title": entity.title,
        "slug": entity.slug,
        "description": entity.description,
        "createdAt": entity.created_at.isoformat() if entity.created_at else None,
        "updatedAt": entity.updated_at.isoformat() if entity.updated_at else None,
    }


class CategoryService:
    """Owns slug derivation and the title/slug uniqueness rules for categories."""

    def __init__(self, repository: Optional[SQLRepository] = None) -> None:
        self.repository = repository or SQLRepository(Category)
        self.title_guard = UniquenessGuard(self.repository, "title", DuplicateTitleError)
        self.slug_guard = UniquenessGuard(self.repository, "slug", DuplicateTitleError)

    def normalize_title(self, value: str | None) -> str:
        return (value or "").strip()

    def is_title_taken(self, title: str, exclude_id: str | None = None) -> bool:
        return self.title_guard.is_taken(self.normalize_title(title), exclude_id)

    def _ensure_available(self, title: str, slug: str, exclude_id: str | None = None) -> None:
        # Distinct titles can still fold to the same slug.
        self.title_guard.ensure_available(title, exclude_id)
        self.slug_guard.ensure_available(slug, exclude_id)

    # -------------------------- create --------------------------
    def create(self, body: Mapping[str, Any]) -> Category:
        title = self.normalize_title(body.get("title"))
        slug = derive_slug(title)
        self._ensure_available(title, slug)
        extra = {key: body[key] for key in CATEGORY_FIELDS if key in body and key != "title"}
        try:
            entity = self.repository.insert(title=title, slug=slug, **extra)
        except UniqueViolation as exc:
            logger.warning("Concurrent insert for category title %r rejected: %s", title, exc)
            raise DuplicateTitleError() from exc
        logger.info("Created category %s (%s)", entity.id, entity.slug)
        return entity

    # -------------------------- read --------------------------
    def query(self, filters: Mapping[str, Any] | None = None, options: Mapping[str, Any] | None = None) -> QueryResult:
        """
        Paginated listing. Options follow the public contract:
        sortBy as "field:asc|desc", limit (default 10) and page (default 1).
        """
        options = options or {}
        return self.repository.paginate(
            filters or {},
            sort_by=options.get("sortBy"),
            limit=options.get("limit"),
            page=options.get("page"),
        )

    def get_by_id(self, category_id: str) -> Optional[Category]:
        return self.repository.find_by_id(category_id)

    def get_by_slug(self, slug: str) -> Optional[Category]:
        return self.repository.find_one(slug=slug)

    # -------------------------- update --------------------------
    def _update(self, entity: Category, patch: Mapping[str, Any]) -> Category:
        changes = {key: patch[key] for key in CATEGORY_FIELDS if key in patch}
        if "title" in changes:
            title = self.normalize_title(changes["title"])
            if title == entity.title:
                changes.pop("title")
            else:
                slug = derive_slug(title)
                self._ensure_available(title, slug, exclude_id=entity.id)
                changes.update(title=title, slug=slug)
        if not changes:
            return entity
        try:
            saved = self.repository.save(entity.id, changes)
        except UniqueViolation as exc:
            logger.warning("Concurrent update of category %s rejected: %s", entity.id, exc)
            raise DuplicateTitleError() from exc
        if saved is None:
            raise NotFoundError("Category not found")
        logger.info("Updated category %s fields=%s", saved.id, sorted(changes))
        return saved

    def update_by_id(self, category_id: str, patch: Mapping[str, Any]) -> Category:
        entity = self.get_by_id(category_id)
        if not entity:
            raise NotFoundError("Category not found")
        return self._update(entity, patch)

    def update_by_slug(self, slug: str, patch: Mapping[str, Any]) -> Category:
        entity = self.get_by_slug(slug)
        if not entity:
            raise NotFoundError("Category not found")
        return self._update(entity, patch)

    # -------------------------- delete --------------------------
    def _delete(self, entity: Category) -> Category:
        if not self.repository.remove(entity.id):
            raise NotFoundError("Category not found")
        logger.info("Deleted category %s (%s)", entity.id, entity.slug)
        return entity

    def delete_by_id(self, category_id: str) -> Category:
        entity = self.get_by_id(category_id)
        if not entity:
            raise NotFoundError("Category not found")
        return self._delete(entity)

    def delete_by_slug(self, slug: str) -> Category:
        entity = self.get_by_slug(slug)
        if not entity:
            raise NotFoundError("Category not found")
        return self._delete(entity)
