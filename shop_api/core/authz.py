"""Capability gate placed in front of privileged routes."""
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request

from shop_api.domain.roles import RoleTable

logger = logging.getLogger(__name__)


class ForbiddenError(Exception):
    def __init__(self, role: str, capability: str):
        super().__init__(f"Role {role!r} lacks capability {capability!r}")
        self.role = role
        self.capability = capability


def get_role_table(request: Request) -> RoleTable:
    table = getattr(getattr(request.app, "state", None), "role_table", None)
    if table is None:
        raise RuntimeError("Role table nao configurada")
    return table


def current_role(request: Request) -> str:
    """Role of the authenticated caller, set on request.state by the auth layer."""
    role = getattr(request.state, "role", None)
    if not role:
        raise HTTPException(401, "Please authenticate")
    return role


def require_capability(capability: str):
    """Build a dependency rejecting callers whose role lacks `capability`."""

    def _dependency(request: Request, role: str = Depends(current_role)) -> str:
        table = get_role_table(request)
        # UnknownRoleError propagates: a principal with an unconfigured role is a setup bug.
        if not table.allows(role, capability):
            logger.info("Denied %s %s: role %r lacks %s", request.method, request.url.path, role, capability)
            raise ForbiddenError(role, capability)
        return role

    return _dependency
