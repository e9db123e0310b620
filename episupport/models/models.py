import uuid

from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Time, ForeignKey, Boolean, Text,
    UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from episupport.database.database import Base
from episupport.schemas.enums import UserRole

# ---------- USER ----------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    first_name = Column(String, nullable=True)
    surname = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.MONITORED)
    push_token = Column(String, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    info_during_seizure = Column(Text, nullable=True)

    seizures = relationship("Seizure", back_populates="monitored_user")
    medications = relationship("Medication", back_populates="user")


# ---------- SUPPORT RELATION ----------
class UserSupportRelation(Base):
    __tablename__ = "user_support_relations"
    __table_args__ = (
        UniqueConstraint("monitored_user_id", "support_user_id", name="uq_monitored_support"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    monitored_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    support_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    monitored_user = relationship("User", foreign_keys=[monitored_user_id])
    support_user = relationship("User", foreign_keys=[support_user_id])


# ---------- SEIZURE ----------
class Seizure(Base):
    __tablename__ = "seizures"

    id = Column(Integer, primary_key=True, index=True)
    monitored_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    heart_rate = Column(Float, nullable=False)
    spo2 = Column(Float, nullable=False)
    movement = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    note = Column(Text, nullable=True)

    monitored_user = relationship("User", back_populates="seizures")


# ---------- MEDICATION ----------
class Medication(Base):
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    dose = Column(String, nullable=True)
    time = Column(Time, nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="medications")
