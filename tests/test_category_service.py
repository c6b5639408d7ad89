from __future__ import annotations

import pytest

from shop_api.db.models import Category
from shop_api.repositories.sql_repository import SQLRepository
from shop_api.services.category_service import CategoryService, category_to_dict
from shop_api.services.errors import DuplicateTitleError, NotFoundError


def _count(title: str) -> int:
    return SQLRepository(Category).paginate({"title": title}).total_results


def test_create_derives_slug_and_timestamps(temp_db):
    svc = CategoryService()
    category = svc.create({"title": "  Áo Dài Việt Nam  ", "description": "Traditional"})

    assert category.title == "Áo Dài Việt Nam"
    assert category.slug == "ao-dai-viet-nam"
    assert len(category.id) == 24
    assert category.created_at is not None
    payload = category_to_dict(category)
    assert set(payload) == {"id", "title", "slug", "description", "createdAt", "updatedAt"}


def test_create_duplicate_title_fails_and_keeps_single_row(temp_db):
    svc = CategoryService()
    svc.create({"title": "Books"})

    with pytest.raises(DuplicateTitleError):
        svc.create({"title": "Books"})

    assert _count("Books") == 1


def test_titles_folding_to_same_slug_collide(temp_db):
    svc = CategoryService()
    svc.create({"title": "Hello World"})

    with pytest.raises(DuplicateTitleError):
        svc.create({"title": "hello world!!"})


def test_symbol_only_titles_share_the_empty_slug(temp_db):
    svc = CategoryService()
    first = svc.create({"title": "???"})
    assert first.slug == ""

    with pytest.raises(DuplicateTitleError):
        svc.create({"title": "!!!"})


def test_storage_constraint_catches_a_race(temp_db, monkeypatch):
    svc = CategoryService()
    svc.create({"title": "Garden"})
    # Both pre-checks lose the race: only the UNIQUE constraint stands.
    monkeypatch.setattr(svc.title_guard, "is_taken", lambda *a, **kw: False)
    monkeypatch.setattr(svc.slug_guard, "is_taken", lambda *a, **kw: False)

    with pytest.raises(DuplicateTitleError):
        svc.create({"title": "Garden"})

    assert _count("Garden") == 1


def test_lookup_returns_none_when_absent(temp_db):
    svc = CategoryService()
    assert svc.get_by_slug("missing") is None
    assert svc.get_by_id("0" * 24) is None


def test_update_title_recomputes_slug(temp_db):
    svc = CategoryService()
    svc.create({"title": "Shoes"})

    updated = svc.update_by_slug("shoes", {"title": "Giày Dép"})

    assert updated.title == "Giày Dép"
    assert updated.slug == "giay-dep"
    assert svc.get_by_slug("shoes") is None
    assert svc.get_by_slug("giay-dep").id == updated.id


def test_update_to_taken_title_leaves_both_untouched(temp_db):
    svc = CategoryService()
    a = svc.create({"title": "Alpha", "description": "first"})
    b = svc.create({"title": "Beta", "description": "second"})

    with pytest.raises(DuplicateTitleError):
        svc.update_by_slug("beta", {"title": "Alpha", "description": "changed"})

    stored_a = svc.get_by_id(a.id)
    stored_b = svc.get_by_id(b.id)
    assert (stored_a.title, stored_a.slug, stored_a.description) == ("Alpha", "alpha", "first")
    assert (stored_b.title, stored_b.slug, stored_b.description) == ("Beta", "beta", "second")


def test_update_non_title_field_keeps_slug(temp_db):
    svc = CategoryService()
    category = svc.create({"title": "Toys"})

    updated = svc.update_by_id(category.id, {"description": "For kids"})

    assert updated.slug == "toys"
    assert updated.description == "For kids"


def test_update_with_same_title_is_not_a_duplicate(temp_db):
    svc = CategoryService()
    svc.create({"title": "Music"})

    updated = svc.update_by_slug("music", {"title": "Music", "description": "Vinyl"})

    assert updated.slug == "music"
    assert updated.description == "Vinyl"


def test_slug_is_not_settable_by_callers(temp_db):
    svc = CategoryService()
    category = svc.create({"title": "Tools", "slug": "custom"})
    assert category.slug == "tools"

    updated = svc.update_by_id(category.id, {"slug": "other", "description": "x"})
    assert updated.slug == "tools"


def test_update_missing_entity_raises_not_found(temp_db):
    svc = CategoryService()
    with pytest.raises(NotFoundError):
        svc.update_by_slug("nope", {"title": "Anything"})
    with pytest.raises(NotFoundError):
        svc.update_by_id("f" * 24, {"title": "Anything"})


def test_delete_twice_raises_not_found(temp_db):
    svc = CategoryService()
    category = svc.create({"title": "Garden Tools"})

    deleted = svc.delete_by_slug("garden-tools")
    assert deleted.id == category.id

    with pytest.raises(NotFoundError):
        svc.delete_by_slug("garden-tools")
    with pytest.raises(NotFoundError):
        svc.delete_by_id(category.id)


def test_delete_nonexistent_slug(temp_db):
    with pytest.raises(NotFoundError):
        CategoryService().delete_by_slug("ghost")


def test_query_paginates_with_defaults(temp_db):
    svc = CategoryService()
    for n in range(12):
        svc.create({"title": f"Category {n:02d}"})

    first = svc.query({}, {"limit": 10, "page": 1})
    assert len(first.items) == 10
    assert first.total_results == 12
    assert first.total_pages == 2

    second = svc.query({}, {"page": 2, "sortBy": "title:asc"})
    assert [c.title for c in second.items] == ["Category 10", "Category 11"]

    defaults = svc.query()
    assert (defaults.limit, defaults.page) == (10, 1)


def test_query_filters_and_sorts(temp_db):
    svc = CategoryService()
    for title in ("Bags", "Apparel", "Cameras"):
        svc.create({"title": title})

    result = svc.query({}, {"sortBy": "title:desc"})
    assert [c.title for c in result.items] == ["Cameras", "Bags", "Apparel"]

    only = svc.query({"title": "Bags"}, {})
    assert [c.slug for c in only.items] == ["bags"]
    assert only.total_results == 1


def _disable_guards(monkeypatch, svc):
    monkeypatch.setattr(svc.title_guard, "is_taken", lambda *a, **kw: False)
    monkeypatch.setattr(svc.slug_guard, "is_taken", lambda *a, **kw: False)


def test_storage_constraint_catches_a_race_on_update(temp_db, monkeypatch):
    svc = CategoryService()
    svc.create({"title": "Alpha"})
    b = svc.create({"title": "Beta", "description": "second"})
    _disable_guards(monkeypatch, svc)

    with pytest.raises(DuplicateTitleError):
        svc.update_by_id(b.id, {"title": "Alpha", "description": "changed"})
    with pytest.raises(DuplicateTitleError):
        svc.update_by_slug("beta", {"title": "Alpha"})

    stored = svc.get_by_id(b.id)
    assert (stored.title, stored.slug, stored.description) == ("Beta", "beta", "second")


def test_is_title_taken_excludes_the_entity_itself(temp_db):
    svc = CategoryService()
    category = svc.create({"title": "Lamps"})

    assert svc.is_title_taken("Lamps")
    assert svc.is_title_taken("  Lamps ")
    assert not svc.is_title_taken("Lamps", exclude_id=category.id)
    assert not svc.is_title_taken("Rugs")
