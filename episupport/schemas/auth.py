from typing import Optional

from pydantic import EmailStr, field_validator

from episupport.schemas.base import CamelModel
from episupport.schemas.enums import UserRole
from episupport.schemas.user import UserInfo

# ---------------- SIGNUP ----------------
class SignupRequest(CamelModel):
    email: EmailStr
    password: str
    first_name: Optional[str] = None
    surname: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole = UserRole.MONITORED

    @field_validator("role", mode="before")
    @classmethod
    def parse_role(cls, value):
        # case-insensitive, see UserRole._missing_
        return UserRole(value) if isinstance(value, str) else value

# ---------------- LOGIN ----------------
class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class LoginResponse(CamelModel):
    has_error: bool = False
    message: str
    user_info: Optional[UserInfo] = None
    token: Optional[str] = None
    token_type: str = "bearer"
