from datetime import datetime
from typing import List, Optional

from pydantic import Field

from episupport.schemas.base import CamelModel
from episupport.schemas.enums import DeliveryStatus

# ---------------- VITALS / LOCATION ----------------
class Vitals(CamelModel):
    heart_rate: Optional[float] = None
    spo2: Optional[float] = Field(None, alias="spO2")
    movement: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.heart_rate, self.spo2, self.movement)

class Location(CamelModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.latitude is not None and self.longitude is not None


# ---------------- SEIZURE ALERT ----------------
class SeizureAlertRequest(CamelModel):
    monitored_email: Optional[str] = Field(None, alias="epilepsyUserEmail")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    heart_rate: Optional[float] = None
    spo2: Optional[float] = Field(None, alias="spO2")
    movement: Optional[int] = None

    def vitals(self) -> Vitals:
        return Vitals(heart_rate=self.heart_rate, spo2=self.spo2, movement=self.movement)

    def location(self) -> Location:
        return Location(latitude=self.latitude, longitude=self.longitude)

class DeliveryOut(CamelModel):
    token: str
    status: DeliveryStatus
    reason: Optional[str] = None

class SeizureAlertResponse(CamelModel):
    message: str
    seizure_id: Optional[int] = None
    notified: int = 0
    failed: int = 0
    deliveries: List[DeliveryOut] = []


# ---------------- SEIZURE LOG ----------------
class SeizureOut(CamelModel):
    id: int
    heart_rate: float
    spo2: float = Field(alias="spO2")
    movement: int
    timestamp: datetime
    note: Optional[str] = None

class SeizureNoteUpdate(CamelModel):
    note: Optional[str] = None
