import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from episupport.crud.crud import get_user_by_email_or_404, TIME_FORMAT
from episupport.crud.support_graph import SupportRelationGraph
from episupport.models.models import Medication, Seizure, User
from episupport.schemas.alerts import Location, Vitals
from episupport.utils.push import Delivered, DeliveryResult, Failed, PushNotifier

logger = logging.getLogger(__name__)

SEIZURE_ALERT_TITLE = "Seizure Alert!"
MEDICATION_ADDED_TITLE = "Medication Added"


# ---------------- MESSAGE FORMATTING ----------------
def format_seizure_body(user: User) -> str:
    return f"{user.first_name} might need help!"


def seizure_payload(location: Optional[Location] = None) -> Dict[str, str]:
    """Navigation hint for the app, plus coordinates when both are known."""
    data = {"navigateTo": "gps"}
    if location is not None and location.is_complete:
        data["latitude"] = str(location.latitude)
        data["longitude"] = str(location.longitude)
    return data


# ---------------- SEIZURE ALERT ----------------
@dataclass
class AlertOutcome:
    seizure: Optional[Seizure] = None
    deliveries: List[DeliveryResult] = field(default_factory=list)

    @property
    def delivered(self) -> int:
        return sum(1 for r in self.deliveries if isinstance(r, Delivered))

    @property
    def failed(self) -> int:
        return sum(1 for r in self.deliveries if isinstance(r, Failed))


class SeizureAlertService:
    """
    Persists a seizure (when the vitals are complete) and fans the alert out
    to every support user linked to the monitored user.
    """

    def __init__(self, db: Session, graph: SupportRelationGraph, notifier: PushNotifier):
        self.db = db
        self.graph = graph
        self.notifier = notifier

    def record_seizure(self, user: User, vitals: Optional[Vitals]) -> Optional[Seizure]:
        if vitals is None or not vitals.is_complete:
            logger.debug("Incomplete vitals for %s, seizure not recorded", user.email)
            return None

        seizure = Seizure(
            monitored_user_id=user.id,
            heart_rate=vitals.heart_rate,
            spo2=vitals.spo2,
            movement=vitals.movement,
            timestamp=datetime.now(timezone.utc),
        )
        self.db.add(seizure)
        self.db.commit()
        self.db.refresh(seizure)
        logger.info("Seizure %s recorded for %s", seizure.id, user.email)
        return seizure

    def raise_seizure_alert(
        self,
        monitored_email: str,
        vitals: Optional[Vitals] = None,
        location: Optional[Location] = None,
    ) -> AlertOutcome:
        user = get_user_by_email_or_404(self.db, monitored_email, "Epilepsy user")

        # Persist before any dispatch attempt
        outcome = AlertOutcome(seizure=self.record_seizure(user, vitals))

        body = format_seizure_body(user)
        data = seizure_payload(location)

        for supporter in self.graph.list_supporters_of(user.id):
            if not supporter.push_token:
                logger.info("Supporter %s has no push token, skipped", supporter.email)
                continue

            result = self.notifier.send(supporter.push_token, SEIZURE_ALERT_TITLE, body, data)
            outcome.deliveries.append(result)
            if isinstance(result, Failed):
                logger.warning("🚨 Seizure alert for %s not delivered to %s: %s",
                               user.email, supporter.email, result.reason)

        logger.info("🚨 Seizure alert for %s: %d delivered, %d failed",
                    user.email, outcome.delivered, outcome.failed)
        return outcome


# ---------------- MEDICATION ----------------
def notify_medication_added(notifier: PushNotifier, medication: Medication) -> DeliveryResult:
    """One-shot push to the owner of a newly added medication."""
    label = f"{medication.name} {medication.dose}" if medication.dose else medication.name
    message = f"Medication added: {label} at {medication.time.strftime(TIME_FORMAT)}"
    result = notifier.send_to_user(medication.user, MEDICATION_ADDED_TITLE, message, {"screen": "Medicine"})
    if isinstance(result, Failed):
        logger.warning("Medication notification for %s not sent: %s", medication.user.email, result.reason)
    return result
