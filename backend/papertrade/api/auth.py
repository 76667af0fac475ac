import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from papertrade.core.auth import (
    hash_password, verify_password, create_access_token, get_current_user,
)
from papertrade.core.database import get_db
from papertrade.models.user import User
from papertrade.schemas.auth import (
    UserCreate, UserLogin, UserResponse, Token, ProfileUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])
user_router = APIRouter(prefix="/api/user", tags=["user"])

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def _check_username(db: Session, username: str):
    if len(username) < MIN_USERNAME_LENGTH:
        raise HTTPException(status_code=400, detail="Username must be at least 3 characters")
    if db.query(User).filter(User.username == username).first():
        raise HTTPException(status_code=409, detail="Username already taken")


def _check_password(password: str):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")


# ─── Register ───
@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, db: Session = Depends(get_db)):
    username = data.username.strip()
    _check_username(db, username)
    _check_password(data.password)

    user = User(username=username, password_hash=hash_password(data.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s (id=%d)", user.username, user.id)
    return user


# ─── Login ───
@router.post("/login", response_model=Token)
def login(data: UserLogin, db: Session = Depends(get_db)):
    username = data.username.strip()
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login for username %r", username)
        raise HTTPException(status_code=401, detail="Invalid username or password")
    token = create_access_token({"sub": str(user.id)})
    return Token(access_token=token)


# ─── Logout (tokens are stateless; the client drops its copy) ───
@router.post("/logout")
def logout(user: User = Depends(get_current_user)):
    logger.info("User %s logged out", user.username)
    return {"status": "ok"}


# ─── Get current user ───
@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return user


@user_router.get("", response_model=UserResponse)
def get_user(user: User = Depends(get_current_user)):
    return user


# ─── Update profile (username, password) ───
@user_router.patch("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    if payload.username is not None:
        username = payload.username.strip()
        if username != current_user.username:
            _check_username(db, username)
            current_user.username = username

    if payload.new_password:
        _check_password(payload.new_password)
        current_user.password_hash = hash_password(payload.new_password)

    db.commit()
    db.refresh(current_user)
    return current_user
