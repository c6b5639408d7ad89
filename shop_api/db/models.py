"""SQLAlchemy models for categories and users."""
from __future__ import annotations

from sqlalchemy import Column, Date, DateTime, String, Text, func

from .session import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(24), primary_key=True)
    title = Column(String(255), unique=True, nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class User(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True)
    username = Column(String(64), unique=True, nullable=False)
    fullname = Column(String(255), nullable=False)
    dob = Column(Date, nullable=False)
    address = Column(Text, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(32), default="user", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
