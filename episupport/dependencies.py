"""
Dependency providers for FastAPI routes.

Every collaborator is built per request from its own dependencies, so tests
can swap any of them through `app.dependency_overrides`.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from episupport.crud.support_graph import SupportRelationGraph
from episupport.database.database import get_db
from episupport.utils.alerts import SeizureAlertService
from episupport.utils.push import PushNotifier


def get_push_notifier() -> PushNotifier:
    """Dependency to get a push gateway client."""
    return PushNotifier()


def get_support_graph(db: Session = Depends(get_db)) -> SupportRelationGraph:
    """Dependency to get the support relation graph bound to the request session."""
    return SupportRelationGraph(db)


def get_alert_service(
    db: Session = Depends(get_db),
    graph: SupportRelationGraph = Depends(get_support_graph),
    notifier: PushNotifier = Depends(get_push_notifier),
) -> SeizureAlertService:
    """Dependency to get the seizure alert orchestrator."""
    return SeizureAlertService(db, graph, notifier)
