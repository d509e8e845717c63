# src/tuiter_stage/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .likes import router as likes_router
from .media import router as media_router
from .tuits import router as tuits_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "likes_router",
    "media_router",
    "tuits_router",
    "users_router",
]
