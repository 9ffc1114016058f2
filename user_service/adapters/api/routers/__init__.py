# user_service/adapters/api/routers/__init__.py
"""
API Route Definitions.

- `users`: CRUD and activation endpoints for the User resource.
- `health`: System health checks.
"""

from .health import router as health_router
from .users import router as users_router

__all__ = [
    "health_router",
    "users_router",
]
