import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from episupport.crud import crud
from episupport.database.database import get_db
from episupport.dependencies import get_push_notifier
from episupport.schemas.medications import MedicationInfo
from episupport.utils.alerts import notify_medication_added
from episupport.utils.push import PushNotifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/medications",
    tags=["Medications"],
    responses={404: {"description": "Not found"}},
)

# ---------------- LIST ----------------
@router.get("/user/{user_id}", response_model=List[MedicationInfo])
def get_user_medications(user_id: int, db: Session = Depends(get_db)):
    return [crud.medication_info(m) for m in crud.get_user_medications(db, user_id)]


# ---------------- CREATE / UPDATE ----------------
@router.post("/save", response_model=MedicationInfo)
def save_medication(
    info: MedicationInfo,
    db: Session = Depends(get_db),
    notifier: PushNotifier = Depends(get_push_notifier),
):
    """
    Create a medication (no `id`) or update an existing one.
    The owner gets a one-off push when a medication is created.
    """
    medication, created = crud.save_medication(db, info)
    logger.info("Medication %s %s for user %s", medication.id, "created" if created else "updated", medication.user_id)
    if created:
        notify_medication_added(notifier, medication)
    return crud.medication_info(medication)


# ---------------- DELETE ----------------
@router.delete("/delete/{user_id}/{medication_id}")
def delete_medication(user_id: int, medication_id: int, db: Session = Depends(get_db)):
    crud.delete_medication(db, user_id, medication_id)
    logger.info("Medication %s deleted for user %s", medication_id, user_id)
    return {"message": "Medication deleted"}
