"""Like-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class LikeResponse(BaseModel):
    tuit_id: str
    liked_by: str

    model_config = ConfigDict(from_attributes=True)


class LikeToggleResponse(BaseModel):
    """State of the like relation after a toggle and the recomputed count."""

    state: Literal["LIKED", "UNLIKED"]
    likes: int
