from typing import List, Optional

from pydantic import Field

from episupport.schemas.base import CamelModel
from episupport.schemas.user import SupporterOut

# ------------------ SUPPORT LINK ------------------
class SupportLinkRequest(CamelModel):
    monitored_email: Optional[str] = Field(None, alias="epilepsyUserEmail")
    support_email: Optional[str] = Field(None, alias="supportUserEmail")

class TeamManageRequest(SupportLinkRequest):
    activate: Optional[bool] = None

class SupportLinkResponse(CamelModel):
    message: str
    linked: bool

# ------------------ TEAM ------------------
class TeamOut(CamelModel):
    team_members: List[SupporterOut] = []
