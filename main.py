# =============================================================================
# 🚀 QR Payload Studio – Hauptapplikation (main.py)
# =============================================================================

from __future__ import annotations
import os
import logging
from pathlib import Path
from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from dotenv import load_dotenv

# -------------------------------------------------------------------------
# 1️⃣ .env laden (muss ganz oben sein!)
# -------------------------------------------------------------------------
env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path)

from database import engine
from utils.errors import (
    EmptyPayload,
    MissingRequiredColumns,
    NotFoundOrForbidden,
    PayloadError,
    RendererUnavailable,
    Unauthenticated,
)
from utils.history_tables import ensure_history_tables

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------------
# 2️⃣ FastAPI App
# -------------------------------------------------------------------------
app = FastAPI(title="QR Payload Studio", version="2.0")
ensure_history_tables(engine)

# -------------------------------------------------------------------------
# 3️⃣ Session Middleware (Identität des Eigentümers)
# -------------------------------------------------------------------------
app.add_middleware(
    SessionMiddleware,
    secret_key=os.getenv("SESSION_SECRET", "qr-payload-secret-key"),
    max_age=60 * 60 * 24 * 7,
    session_cookie=os.getenv("SESSION_COOKIE_NAME", "qr_session"),
    same_site=os.getenv("SESSION_SAME_SITE", "lax"),
    https_only=os.getenv("SESSION_HTTPS_ONLY", "0") in {"1", "true", "yes"},
)

# -------------------------------------------------------------------------
# 4️⃣ Fehlerbehandlung – fachliche Fehler → HTTP-Status
# -------------------------------------------------------------------------
ERROR_STATUS: Dict[Type[PayloadError], int] = {
    EmptyPayload: 400,
    MissingRequiredColumns: 400,
    Unauthenticated: 401,
    NotFoundOrForbidden: 404,
    RendererUnavailable: 502,
}


@app.exception_handler(PayloadError)
async def payload_error_handler(request: Request, exc: PayloadError) -> JSONResponse:
    status_code = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400
    )
    content: Dict[str, object] = {"detail": str(exc)}
    if isinstance(exc, MissingRequiredColumns):
        content["missing"] = exc.missing
    return JSONResponse(status_code=status_code, content=content)


# -------------------------------------------------------------------------
# 5️⃣ Routen laden
# -------------------------------------------------------------------------
from routes import auth
from routes import qr_base
from routes import history
from routes import bulk

app.include_router(auth.router)
app.include_router(qr_base.router)
app.include_router(history.router)
app.include_router(bulk.router)


# -------------------------------------------------------------------------
# 6️⃣ Home
# -------------------------------------------------------------------------
@app.get("/")
def home() -> Dict[str, str]:
    return {"name": app.title, "version": app.version}
