from typing import Optional

from pydantic import Field

from episupport.schemas.base import CamelModel

# ------------------ MEDICATION ------------------
class MedicationInfo(CamelModel):
    id: Optional[int] = None
    user_id: int
    name: str
    dose: Optional[str] = None
    time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="Time of day as HH:MM")
    enabled: bool = True
