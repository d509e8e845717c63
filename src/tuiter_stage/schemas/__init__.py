# src/tuiter_stage/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .like import LikeResponse, LikeToggleResponse
from .media import ReconciliationReport, ReferenceSetResponse
from .tuit import TuitResponse
from .user import Credentials, PrincipalSnapshot, UserCreate, UserResponse, UserUpdate

__all__ = [
    "Credentials", "PrincipalSnapshot", "UserCreate", "UserResponse", "UserUpdate",
    "LikeResponse", "LikeToggleResponse",
    "ReconciliationReport", "ReferenceSetResponse",
    "TuitResponse",
]
