"""
High-level use cases for the shop API.

Each service module orchestrates repositories and domain helpers to implement
business rules (derive slugs, keep titles unique, paginate listings).

Routers (FastAPI endpoints) should call these services instead of touching the
SQL session directly.
"""
