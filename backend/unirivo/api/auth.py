from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session

from unirivo.auth import create_access_token, get_current_user, hash_password, verify_password
from unirivo.database import get_db
from unirivo.models.user import User
from unirivo.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest


router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    email = payload.email.strip().lower()
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=409, detail="Email already registered")

    name = (payload.name or "").strip() or email.split("@")[0]
    user = User(email=email, password_hash=hash_password(payload.password), name=name, full_name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user {}", user.id)

    return AuthResponse(access_token=create_access_token(user.id), email=user.email)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    email = payload.email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    return AuthResponse(access_token=create_access_token(user.id), email=user.email)


@router.get("/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    return MeResponse(id=current_user.id, email=current_user.email, name=current_user.name)
