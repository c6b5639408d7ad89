"""
Core utilities shared across the shop API.

This package hosts configuration helpers and the authorization gate. Services
should depend on these primitives instead of reading os.environ directly.
"""
