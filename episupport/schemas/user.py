from typing import Optional

from pydantic import Field

from episupport.schemas.base import CamelModel
from episupport.schemas.enums import UserRole

# ------------------ USER OUTPUT ------------------
class UserInfo(CamelModel):
    id: int
    email: str
    first_name: Optional[str] = None
    surname: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None
    info_during_seizure: Optional[str] = None
    is_available: bool = True

# ------------------ USER UPDATE ------------------
class UserInfoUpdate(CamelModel):
    id: int
    first_name: Optional[str] = None
    surname: Optional[str] = None
    phone: Optional[str] = None
    info_during_seizure: Optional[str] = None

# ------------------ PUSH TOKEN ------------------
class PushTokenByEmail(CamelModel):
    email: Optional[str] = None
    push_token: Optional[str] = None

class PushTokenByUser(CamelModel):
    user_id: int
    push_token: Optional[str] = None

# ------------------ AVAILABILITY ------------------
class AvailabilityUpdate(CamelModel):
    is_available: Optional[bool] = None

class AvailabilityOut(CamelModel):
    is_available: bool

# ------------------ SUPPORT DIRECTORY ------------------
class SupporterOut(CamelModel):
    first_name: Optional[str] = None
    surname: Optional[str] = None
    email: str
    is_available: bool = True

class SupportedUserOut(CamelModel):
    first_name: Optional[str] = None
    surname: Optional[str] = None
    email: str
    team_size: int = Field(0, ge=0)
