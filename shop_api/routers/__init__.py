"""
FastAPI routers grouped by resource (categories, users).

Each module exposes an APIRouter included by app.create_app(). Endpoints stay
thin: they validate input, call a service and map absence to 404.
"""
