from __future__ import annotations

import pytest
from pydantic import ValidationError

from shop_api.schemas import CategoryUpdate, UserCreate, UserUpdate


def test_user_update_strips_text_fields():
    patch = UserUpdate(username="  linh ", address=" Hue ")
    assert patch.model_dump(exclude_unset=True) == {"username": "linh", "address": "Hue"}


@pytest.mark.parametrize("field", ["username", "fullname", "address"])
def test_user_update_rejects_blank_text(field):
    with pytest.raises(ValidationError):
        UserUpdate(**{field: "   "})


def test_user_create_rejects_blank_username():
    with pytest.raises(ValidationError):
        UserCreate(
            username="   ",
            fullname="Linh Tran",
            dob="1995-02-01",
            address="Da Nang",
            email="linh@example.com",
            role="user",
        )


def test_patches_need_at_least_one_field():
    with pytest.raises(ValidationError):
        UserUpdate()
    with pytest.raises(ValidationError):
        CategoryUpdate()
