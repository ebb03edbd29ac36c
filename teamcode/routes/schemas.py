from datetime import datetime

from pydantic import BaseModel


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    teacher: bool
    admin: bool
    anonymous_id: str

    class Config:
        from_attributes = True


class TeamResponse(BaseModel):
    id: int
    name: str
    owner_id: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True
