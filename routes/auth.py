# routes/auth.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy import or_
from sqlalchemy.orm import Session

from auth_utils import SESSION_USER_KEY, current_owner_id, password_hash, verify_password
from database import get_db
from models.user import User

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────
# 🔐 Authentifizierungs-Router
# ─────────────────────────────────────────────
router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterIn(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., min_length=3, max_length=200)
    password: str = Field(..., min_length=6)


class LoginIn(BaseModel):
    login: str = Field(..., description="Username oder E-Mail")
    password: str


def _serialize_user(user: User) -> dict:
    return {"id": user.id, "username": user.username, "email": user.email}


@router.post("/register", status_code=201)
def register(payload: RegisterIn, request: Request, db: Session = Depends(get_db)):
    username = payload.username.strip()
    email = payload.email.strip().lower()

    existing = db.query(User).filter(or_(User.username == username, User.email == email)).first()
    if existing:
        raise HTTPException(status_code=409, detail="Username or email already registered")

    user = User(username=username, email=email, password_hash=password_hash(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)

    request.session[SESSION_USER_KEY] = user.id
    logger.info(f"🆕 Benutzer registriert: {user.username} (ID {user.id})")
    return _serialize_user(user)


@router.post("/login")
def login(payload: LoginIn, request: Request, db: Session = Depends(get_db)):
    ident = payload.login.strip()
    user: Optional[User] = (
        db.query(User)
        .filter(or_(User.username == ident, User.email == ident.lower()))
        .first()
    )
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    request.session[SESSION_USER_KEY] = user.id
    return _serialize_user(user)


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"ok": True}


@router.get("/me")
def me(request: Request, db: Session = Depends(get_db)):
    owner_id = current_owner_id(request)
    user = db.get(User, owner_id) if owner_id is not None else None
    if not user:
        raise HTTPException(status_code=401, detail="Must be logged in")
    return _serialize_user(user)
