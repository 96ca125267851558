from invitely.models.base import Base, BaseModel, TimeStamp
from invitely.models.user import User

__all__ = [
    "Base",
    "BaseModel",
    "TimeStamp",
    "User",
]
