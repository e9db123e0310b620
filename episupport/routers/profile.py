from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from episupport.crud import crud
from episupport.database.database import get_db
from episupport.schemas.user import UserInfo, UserInfoUpdate, PushTokenByUser

router = APIRouter(
    prefix="/api/profile",
    tags=["Profile"],
    responses={404: {"description": "Not found"}},
)

# ---------------- GET PROFILE ----------------
@router.get("/get/{user_id}", response_model=UserInfo)
def get_profile(user_id: int, db: Session = Depends(get_db)):
    return crud.get_profile(db, user_id)


# ---------------- UPDATE PROFILE ----------------
@router.put("/update", response_model=UserInfo)
def update_profile(updates: UserInfoUpdate, db: Session = Depends(get_db)):
    """Update names, phone and the seizure instructions shown to supporters."""
    return crud.update_profile(db, updates)


# ---------------- PUSH TOKEN ----------------
@router.post("/updatePushToken")
def update_push_token(payload: PushTokenByUser, db: Session = Depends(get_db)):
    user = crud.get_profile(db, payload.user_id)
    crud.set_push_token(db, user, payload.push_token)
    return {"message": "Push token updated successfully"}
