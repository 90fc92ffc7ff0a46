# auth_utils.py
from typing import Optional

from fastapi import Request
from passlib.context import CryptContext

from utils.errors import Unauthenticated

SESSION_USER_KEY = "user_id"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# ---------------------------------------------------------------------
# 🔐 Passwort-Hash
# ---------------------------------------------------------------------
def password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password, hashed)
    except ValueError:
        return False


# ---------------------------------------------------------------------
# 👤 Aktueller Eigentümer (aus Session)
# ---------------------------------------------------------------------
def current_owner_id(request: Request) -> Optional[int]:
    """
    Liefert die ID des eingeloggten Benutzers oder None.
    Die Rückgabe wird explizit an den Verlauf weitergereicht.
    """
    uid = request.session.get(SESSION_USER_KEY)
    if uid is None:
        return None
    try:
        return int(uid)
    except (TypeError, ValueError):
        return None


def require_owner_id(request: Request) -> int:
    """FastAPI-Dependency für alle eigentümerbezogenen Routen."""
    owner_id = current_owner_id(request)
    if owner_id is None:
        raise Unauthenticated()
    return owner_id
