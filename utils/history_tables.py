from __future__ import annotations

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from models.user import User
from models.saved_payload import SavedPayload

logger = logging.getLogger(__name__)


def ensure_history_tables(engine: Engine) -> None:
    """Erstellt Benutzer- und Verlaufstabellen idempotent."""
    try:
        User.__table__.create(bind=engine, checkfirst=True)
        SavedPayload.__table__.create(bind=engine, checkfirst=True)
        logger.info("✅ Verlaufstabellen geprüft/ergänzt.")
    except SQLAlchemyError as exc:
        logger.warning(f"⚠️ Konnte Verlaufstabellen nicht automatisch erstellen: {exc}")
