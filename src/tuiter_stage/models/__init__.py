# src/tuiter_stage/models/__init__.py
"""SQLAlchemy models for the Tuiter application."""

from .like import Like
from .tuit import Tuit
from .user import Role, User

__all__ = [
    "Like",
    "Role",
    "Tuit",
    "User",
]
