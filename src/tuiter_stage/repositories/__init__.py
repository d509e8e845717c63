"""Data access wrappers around the SQLAlchemy session."""

from .like_repo import LikeRepository
from .tuit_repo import TuitRepository
from .user_repo import UserRepository

__all__ = ["LikeRepository", "TuitRepository", "UserRepository"]
