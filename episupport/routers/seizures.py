import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from episupport.crud import crud
from episupport.database.database import get_db
from episupport.dependencies import get_alert_service
from episupport.schemas.alerts import (
    DeliveryOut, SeizureAlertRequest, SeizureAlertResponse, SeizureNoteUpdate, SeizureOut
)
from episupport.utils.alerts import SeizureAlertService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Seizures"],
    responses={404: {"description": "Not found"}},
)

# ---------------- TRIGGER ALERT ----------------
@router.post("/seizure", response_model=SeizureAlertResponse)
def send_seizure_alert(
    payload: SeizureAlertRequest,
    service: SeizureAlertService = Depends(get_alert_service),
):
    """
    Log the seizure (when heart rate, SpO2 and movement are all present) and
    notify every linked support user. Answers 200 once every push has been
    attempted, whatever the individual delivery outcomes.
    """
    if not payload.monitored_email:
        raise HTTPException(status_code=400, detail="epilepsyUserEmail is required")

    outcome = service.raise_seizure_alert(
        payload.monitored_email,
        vitals=payload.vitals(),
        location=payload.location(),
    )
    return SeizureAlertResponse(
        message="Seizure logged and notification sent",
        seizure_id=outcome.seizure.id if outcome.seizure else None,
        notified=outcome.delivered,
        failed=outcome.failed,
        deliveries=[DeliveryOut(token=r.token, status=r.status, reason=r.reason) for r in outcome.deliveries],
    )


# ---------------- LIST SEIZURES ----------------
@router.get("/seizures", response_model=List[SeizureOut])
def get_seizures(
    epilepsy_user_email: Optional[str] = Query(None, alias="epilepsyUserEmail"),
    support_user_email: Optional[str] = Query(None, alias="supportUserEmail"),
    db: Session = Depends(get_db),
):
    return crud.list_seizures(db, monitored_email=epilepsy_user_email, support_email=support_user_email)


# ---------------- UPDATE NOTE ----------------
@router.patch("/seizures/{seizure_id}/note", response_model=SeizureOut)
def update_seizure_note(seizure_id: int, payload: SeizureNoteUpdate, db: Session = Depends(get_db)):
    seizure = crud.update_seizure_note(db, seizure_id, payload.note)
    logger.info("Note %s on seizure %s", "set" if payload.note else "cleared", seizure_id)
    return seizure
