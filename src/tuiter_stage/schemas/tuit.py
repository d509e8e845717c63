# src/tuiter_stage/schemas/tuit.py
"""Tuit-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from tuiter_stage.schemas.user import UserResponse


class TuitResponse(BaseModel):
    """Schema for tuit information returned by the API."""

    id: str
    tuit: str
    posted_by: str
    posted_on: datetime
    image: list[str]
    video: list[str]
    likes: int
    author: UserResponse | None = None

    model_config = ConfigDict(from_attributes=True)
