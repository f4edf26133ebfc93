from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from libs.common.config import get_settings


class AuthUser(BaseModel):
    """
    Represents an authenticated user from a verified bearer token.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role == get_settings().ADMIN_ROLE
