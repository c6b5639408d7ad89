"""Request bodies accepted by the HTTP adapter."""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"


class _PatchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self


class CategoryCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class CategoryUpdate(_PatchModel):
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str
    fullname: str
    dob: date
    address: str
    email: str = Field(pattern=EMAIL_PATTERN)
    role: str

    @field_validator("username", "fullname", "address")
    @classmethod
    def strip_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class UserUpdate(_PatchModel):
    username: Optional[str] = None
    fullname: Optional[str] = None
    dob: Optional[date] = None
    address: Optional[str] = None
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)

    @field_validator("username", "fullname", "address")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("dob", "email")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value
