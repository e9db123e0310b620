import logging
from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from episupport.crud import crud
from episupport.crud.support_graph import SupportRelationGraph
from episupport.database.database import get_db
from episupport.dependencies import get_support_graph
from episupport.models.models import User
from episupport.schemas.enums import UserRole
from episupport.schemas.support import SupportLinkRequest, SupportLinkResponse, TeamManageRequest, TeamOut
from episupport.schemas.user import (
    AvailabilityOut, AvailabilityUpdate, PushTokenByEmail, SupportedUserOut, SupporterOut
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Support"],
    responses={404: {"description": "Not found"}},
)

# --------------------- Helpers ---------------------
def _resolve_pair(db: Session, payload: SupportLinkRequest) -> Tuple[User, User]:
    if not payload.monitored_email or not payload.support_email:
        raise HTTPException(status_code=400, detail="Missing required parameters")
    monitored = crud.get_user_by_email_or_404(db, payload.monitored_email, "Epilepsy user")
    supporter = crud.get_user_by_email_or_404(db, payload.support_email, "Support user")
    return monitored, supporter


# ---------------- SUPPORT DIRECTORY ----------------
@router.get("/support-users", response_model=List[SupporterOut])
def get_support_users(db: Session = Depends(get_db)):
    return crud.get_users_by_role(db, UserRole.SUPPORT)


# ---------------- PUSH TOKEN ----------------
@router.post("/user/push-token")
def save_push_token(payload: PushTokenByEmail, db: Session = Depends(get_db)):
    if not payload.email:
        raise HTTPException(status_code=400, detail="Email is required")
    user = crud.get_user_by_email_or_404(db, payload.email)
    crud.set_push_token(db, user, payload.push_token)
    return {"message": "Push token saved"}


# ---------------- LINK MANAGEMENT ----------------
@router.post("/user/add-support", response_model=SupportLinkResponse)
def add_support_user(
    payload: SupportLinkRequest,
    db: Session = Depends(get_db),
    graph: SupportRelationGraph = Depends(get_support_graph),
):
    """Link a support user to a monitored user. Adding an existing link is a no-op."""
    monitored, supporter = _resolve_pair(db, payload)
    created = graph.add(monitored.id, supporter.id)
    message = "Support user added" if created else "Support user already added"
    logger.info("add-support %s -> %s: %s", monitored.email, supporter.email, message)
    return SupportLinkResponse(message=message, linked=True)


@router.post("/user/remove-support", response_model=SupportLinkResponse)
def remove_support_user(
    payload: SupportLinkRequest,
    db: Session = Depends(get_db),
    graph: SupportRelationGraph = Depends(get_support_graph),
):
    monitored, supporter = _resolve_pair(db, payload)
    removed = graph.remove(monitored.id, supporter.id)
    message = "Support user removed" if removed else "Support user was not linked"
    logger.info("remove-support %s -> %s: %s", monitored.email, supporter.email, message)
    return SupportLinkResponse(message=message, linked=False)


@router.post("/user/toggle-support", response_model=SupportLinkResponse)
def toggle_support_user(
    payload: SupportLinkRequest,
    db: Session = Depends(get_db),
    graph: SupportRelationGraph = Depends(get_support_graph),
):
    """Flip the link: remove it when present, add it when absent."""
    monitored, supporter = _resolve_pair(db, payload)
    linked = graph.toggle(monitored.id, supporter.id)
    logger.info("toggle-support %s -> %s: now %s", monitored.email, supporter.email, "linked" if linked else "unlinked")
    return SupportLinkResponse(message="Support user added" if linked else "Support user removed", linked=linked)


@router.post("/user/team/manage", response_model=SupportLinkResponse)
def manage_support_user(
    payload: TeamManageRequest,
    db: Session = Depends(get_db),
    graph: SupportRelationGraph = Depends(get_support_graph),
):
    """Set the link state explicitly through `activate`."""
    if payload.activate is None:
        raise HTTPException(status_code=400, detail="Missing required parameters")
    monitored, supporter = _resolve_pair(db, payload)

    if payload.activate:
        created = graph.add(monitored.id, supporter.id)
        message = "Support user added to team" if created else "No changes needed"
    else:
        removed = graph.remove(monitored.id, supporter.id)
        message = "Support user removed from team" if removed else "No changes needed"
    logger.info("team/manage %s -> %s (activate=%s): %s",
                monitored.email, supporter.email, payload.activate, message)
    return SupportLinkResponse(message=message, linked=payload.activate)


# ---------------- TEAMS ----------------
@router.get("/user/{email}/team", response_model=TeamOut)
def get_team_members(
    email: str,
    db: Session = Depends(get_db),
    graph: SupportRelationGraph = Depends(get_support_graph),
):
    monitored = crud.get_user_by_email_or_404(db, email)
    return TeamOut(team_members=[SupporterOut.model_validate(u) for u in graph.list_supporters_of(monitored.id)])


@router.get("/user/{email}/support-teams", response_model=List[SupportedUserOut])
def get_support_teams(
    email: str,
    db: Session = Depends(get_db),
    graph: SupportRelationGraph = Depends(get_support_graph),
):
    supporter = crud.get_user_by_email_or_404(db, email, "Support user")
    return [
        SupportedUserOut(first_name=u.first_name, surname=u.surname, email=u.email, team_size=size)
        for u, size in graph.list_monitored_of(supporter.id)
    ]


# ---------------- AVAILABILITY ----------------
@router.get("/user/{email}/availability", response_model=AvailabilityOut)
def get_availability(email: str, db: Session = Depends(get_db)):
    return crud.get_user_by_email_or_404(db, email)


@router.post("/user/{email}/availability", response_model=AvailabilityOut)
def update_availability(email: str, payload: AvailabilityUpdate, db: Session = Depends(get_db)):
    if payload.is_available is None:
        raise HTTPException(status_code=400, detail="isAvailable is required")
    user = crud.get_user_by_email_or_404(db, email)
    return crud.set_availability(db, user, payload.is_available)
