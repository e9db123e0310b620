import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from episupport.models.models import User, Seizure, Medication
from episupport.schemas.auth import SignupRequest
from episupport.schemas.enums import UserRole
from episupport.schemas.medications import MedicationInfo
from episupport.schemas.user import UserInfoUpdate
from episupport.crud.support_graph import SupportRelationGraph
from episupport.utils.security import get_password_hash

logger = logging.getLogger(__name__)

TIME_FORMAT = "%H:%M"

# ---------------------------- USERS ----------------------------
def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    # emails are stored normalized, see create_user
    return db.query(User).filter(User.email == normalize_email(email)).first()


def get_user_by_email_or_404(db: Session, email: Optional[str], label: str = "User") -> User:
    user = get_user_by_email(db, email) if email else None
    if not user:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return user


def get_users_by_role(db: Session, role: UserRole) -> List[User]:
    return db.query(User).filter(User.role == role).all()


def create_user(db: Session, payload: SignupRequest) -> User:
    """Create an account; the password is stored as a bcrypt hash."""
    if get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="User with this email already exists.")

    user = User(
        email=normalize_email(payload.email),
        password=get_password_hash(payload.password),
        first_name=payload.first_name,
        surname=payload.surname,
        phone=payload.phone,
        role=payload.role,
        is_available=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s signed up as %s", user.email, user.role.value)
    return user


# ---------------------------- PROFILE ----------------------------
def get_profile(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user


def update_profile(db: Session, updates: UserInfoUpdate) -> User:
    user = get_profile(db, updates.id)
    user.first_name = updates.first_name
    user.surname = updates.surname
    user.phone = updates.phone
    if updates.info_during_seizure is not None:
        user.info_during_seizure = updates.info_during_seizure
    db.commit()
    db.refresh(user)
    return user


def set_push_token(db: Session, user: User, push_token: Optional[str]) -> User:
    user.push_token = push_token
    db.commit()
    db.refresh(user)
    logger.info("Push token %s for %s", "stored" if push_token else "cleared", user.email)
    return user


def set_availability(db: Session, user: User, is_available: bool) -> User:
    user.is_available = is_available
    db.commit()
    db.refresh(user)
    return user


# ---------------------------- MEDICATIONS ----------------------------
def medication_info(medication: Medication) -> MedicationInfo:
    return MedicationInfo(
        id=medication.id,
        user_id=medication.user_id,
        name=medication.name,
        dose=medication.dose,
        time=medication.time.strftime(TIME_FORMAT),
        enabled=medication.enabled,
    )


def get_user_medications(db: Session, user_id: int) -> List[Medication]:
    if not get_user(db, user_id):
        return []
    return db.query(Medication).filter(Medication.user_id == user_id).order_by(Medication.time).all()


def save_medication(db: Session, info: MedicationInfo) -> tuple[Medication, bool]:
    """
    Create a medication when `info.id` is None, otherwise update one the user owns.
    Returns (medication, created).
    """
    user = get_user(db, info.user_id)
    if not user:
        raise HTTPException(status_code=404, detail=f"User {info.user_id} not found")

    if info.id is not None:
        medication = db.get(Medication, info.id)
        if not medication or medication.user_id != user.id:
            raise HTTPException(status_code=404, detail=f"Medication {info.id} not found")
        created = False
    else:
        medication = Medication(user_id=user.id)
        db.add(medication)
        created = True

    medication.name = info.name
    medication.dose = info.dose
    medication.time = datetime.strptime(info.time, TIME_FORMAT).time()
    medication.enabled = info.enabled

    db.commit()
    db.refresh(medication)
    return medication, created


def delete_medication(db: Session, user_id: int, medication_id: int) -> None:
    medication = db.get(Medication, medication_id)
    if not get_user(db, user_id) or not medication or medication.user_id != user_id:
        raise HTTPException(status_code=404, detail=f"Medication {medication_id} not found")
    db.delete(medication)
    db.commit()


# ---------------------------- SEIZURES ----------------------------
def get_seizures_for_user(db: Session, monitored_user_id: int) -> List[Seizure]:
    return db.query(Seizure).filter(Seizure.monitored_user_id == monitored_user_id).all()


def list_seizures(
    db: Session,
    monitored_email: Optional[str] = None,
    support_email: Optional[str] = None,
) -> List[Seizure]:
    """
    Seizures of one monitored user, or of every monitored user a supporter is linked to.
    The monitored email wins when both are given.
    """
    if monitored_email:
        user = get_user_by_email_or_404(db, monitored_email, "Epilepsy user")
        return get_seizures_for_user(db, user.id)

    if support_email:
        supporter = get_user_by_email_or_404(db, support_email, "Support user")
        seizures: List[Seizure] = []
        for monitored, _team_size in SupportRelationGraph(db).list_monitored_of(supporter.id):
            seizures.extend(get_seizures_for_user(db, monitored.id))
        return seizures

    raise HTTPException(status_code=400, detail="Email parameter is required")


def update_seizure_note(db: Session, seizure_id: int, note: Optional[str]) -> Seizure:
    seizure = db.get(Seizure, seizure_id)
    if not seizure:
        raise HTTPException(status_code=404, detail="Seizure not found")
    seizure.note = note
    db.commit()
    db.refresh(seizure)
    return seizure
