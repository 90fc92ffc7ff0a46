# utils/qr_save.py
# =============================================================================
# ✅ Speicherlogik für den QR-Verlauf (HistoryGateway)
# - Anlegen, neueste N auflisten, Löschen nur durch den Eigentümer
# - Einträge werden nie verändert
# - kein Caching: jeder Aufruf geht direkt an die Datenbank
# =============================================================================

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.saved_payload import KIND_LENGTH, TITLE_LENGTH, SavedPayload
from utils.errors import NotFoundOrForbidden, Unauthenticated
from utils.qr_config import NormalizedCustomization
from utils.qr_schema import normalize_kind

logger = logging.getLogger("qr_save")
logger.setLevel(logging.INFO)

HISTORY_LIMIT = 50


def _customization_dict(
    customization: Union[NormalizedCustomization, Mapping[str, Any], None],
) -> Optional[Dict[str, Any]]:
    if customization is None:
        return None
    if isinstance(customization, NormalizedCustomization):
        return customization.as_dict()
    return dict(customization)


class HistoryGateway:
    """Eigentümer-bezogener Zugriff auf gespeicherte Payloads."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # =========================================================================
    # ✅ SPEICHERN
    # =========================================================================
    def insert(
        self,
        owner_id: Optional[int],
        kind: str,
        encoded_content: str,
        title: Optional[str] = None,
        fields: Optional[Mapping[str, Any]] = None,
        customization: Union[NormalizedCustomization, Mapping[str, Any], None] = None,
    ) -> int:
        if owner_id is None:
            raise Unauthenticated("Must be logged in to save QR codes")

        record = SavedPayload(
            owner_id=owner_id,
            # auf Spaltenbreite kürzen (MySQL strict mode)
            kind=(normalize_kind(kind) or "text")[:KIND_LENGTH],
            encoded_content=encoded_content,
            title=(title or "")[:TITLE_LENGTH] or None,
        )
        record.set_fields(dict(fields) if fields else None)
        record.set_customization(_customization_dict(customization))

        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"❌ Speichern fehlgeschlagen: kind={kind}, owner={owner_id}")
            raise

        logger.info(f"📦 QR-Payload gespeichert (ID {record.id}, kind={record.kind}, owner={owner_id})")
        return record.id

    # =========================================================================
    # ✅ LESEN
    # =========================================================================
    def list_latest(self, owner_id: Optional[int], limit: int = HISTORY_LIMIT) -> List[SavedPayload]:
        """Neueste Einträge zuerst, maximal HISTORY_LIMIT."""
        if owner_id is None:
            return []
        limit = max(1, min(limit, HISTORY_LIMIT))
        return (
            self.db.query(SavedPayload)
            .filter(SavedPayload.owner_id == owner_id)
            .order_by(SavedPayload.created_at.desc(), SavedPayload.id.desc())
            .limit(limit)
            .all()
        )

    def get_owned(self, record_id: int, owner_id: Optional[int]) -> SavedPayload:
        if owner_id is None:
            raise Unauthenticated()
        record = self.db.get(SavedPayload, record_id)
        if record is None or record.owner_id != owner_id:
            raise NotFoundOrForbidden()
        return record

    # =========================================================================
    # ✅ LÖSCHEN
    # =========================================================================
    def delete_by_id(self, record_id: int, owner_id: Optional[int]) -> None:
        record = self.get_owned(record_id, owner_id)
        try:
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"❌ Löschen fehlgeschlagen (ID {record_id})")
            raise

        logger.info(f"🗑️ QR-Payload gelöscht (ID {record_id}, owner={owner_id})")
