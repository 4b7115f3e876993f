from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AssignmentType(str, Enum):
    specific_user = "specific_user"
    round_robin = "round_robin"
    load_balance = "load_balance"
    role_based = "role_based"


class SuccessResponse(BaseModel):
    """Generic success response base."""

    success: bool = True
    message: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
