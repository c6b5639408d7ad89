"""FastAPI application factory wiring services, role table and error mapping."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shop_api.core.authz import ForbiddenError
from shop_api.core.config import get_settings
from shop_api.domain.roles import load_role_table
from shop_api.repositories.sql_repository import InvalidQueryError
from shop_api.routers import categories as categories_router
from shop_api.routers import users as users_router
from shop_api.services.category_service import CategoryService
from shop_api.services.errors import DuplicateError, NotFoundError
from shop_api.services.user_service import UserService

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"code": status_code, "message": message}, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DuplicateError)
    async def _duplicate(request: Request, exc: DuplicateError):
        return _error(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(ForbiddenError)
    async def _forbidden(request: Request, exc: ForbiddenError):
        return _error(403, "Forbidden")

    @app.exception_handler(InvalidQueryError)
    async def _invalid_query(request: Request, exc: InvalidQueryError):
        return _error(400, str(exc))


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Shop API")

    role_table = load_role_table()
    app.state.role_table = role_table
    app.state.category_service = CategoryService()
    app.state.user_service = UserService(role_table)

    app.include_router(categories_router.router)
    app.include_router(users_router.router)
    register_error_handlers(app)
    logger.info("Shop API configured (env=%s, roles=%s)", settings.app_env, ", ".join(role_table.roles))
    return app


app = create_app()
