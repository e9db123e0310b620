import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from episupport.crud import crud
from episupport.database.database import get_db
from episupport.models.models import User
from episupport.schemas import auth as auth_schemas
from episupport.schemas.user import UserInfo
from episupport.utils import security
from episupport.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# ---------------- SIGNUP ----------------
@router.post("/signup")
def signup(payload: auth_schemas.SignupRequest, db: Session = Depends(get_db)):
    """Create a monitored or support account."""
    crud.create_user(db, payload)
    return {"message": "Signup successful!"}


# ---------------- LOGIN ----------------
@router.post("/login", response_model=auth_schemas.LoginResponse)
def login(request: auth_schemas.LoginRequest, db: Session = Depends(get_db)):
    user = crud.get_user_by_email(db, request.email)
    if not user or not security.verify_password(request.password, user.password):
        logger.info("Failed login for %s", request.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = security.create_access_token(data={"sub": user.email, "role": user.role.value})
    return auth_schemas.LoginResponse(
        message="Login successful",
        user_info=UserInfo.model_validate(user),
        token=token,
    )


# ---------------- CURRENT USER ----------------
@router.get("/me", response_model=UserInfo)
def me(current_user: User = Depends(get_current_user)):
    return current_user
