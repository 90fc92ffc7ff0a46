# routes/history.py
# =============================================================================
# 🕒 QR-Verlauf – Speichern, Auflisten, Laden, Löschen
# =============================================================================

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from auth_utils import current_owner_id, require_owner_id
from database import get_db
from routes.qr_base import FieldSetIn
from utils.errors import EmptyPayload
from utils.qr_config import normalize
from utils.qr_engine import encode
from utils.qr_save import HISTORY_LIMIT, HistoryGateway

router = APIRouter(prefix="/qr/history", tags=["QR-Verlauf"])


def get_history(db: Session = Depends(get_db)) -> HistoryGateway:
    return HistoryGateway(db)


@router.get("")
def list_history(
    request: Request,
    limit: int = HISTORY_LIMIT,
    history: HistoryGateway = Depends(get_history),
) -> dict[str, Any]:
    # Ohne Login: leerer Verlauf statt Fehler
    rows = history.list_latest(current_owner_id(request), limit)
    return {"items": [r.to_dict() for r in rows], "count": len(rows)}


@router.post("", status_code=201)
def save_history(
    body: FieldSetIn,
    owner_id: int = Depends(require_owner_id),
    history: HistoryGateway = Depends(get_history),
) -> dict[str, Any]:
    payload = encode(body.to_field_set())
    if not payload.strip():
        raise EmptyPayload("Please enter content to generate QR code")

    record_id = history.insert(
        owner_id,
        body.kind,
        payload,
        title=body.title,
        fields=body.fields,
        customization=normalize(body.customization),
    )
    return history.get_owned(record_id, owner_id).to_dict()


@router.get("/{record_id}/load")
def load_history(
    record_id: int,
    owner_id: int = Depends(require_owner_id),
    history: HistoryGateway = Depends(get_history),
) -> dict[str, Any]:
    """Gespeicherten Eintrag laden; Design wird beim Lesen normalisiert."""
    data = history.get_owned(record_id, owner_id).to_dict()
    data["customization"] = normalize(data.get("customization")).as_dict()
    data["fields"] = data.get("fields") or {}
    return data


@router.delete("/{record_id}")
def delete_history(
    record_id: int,
    owner_id: int = Depends(require_owner_id),
    history: HistoryGateway = Depends(get_history),
) -> dict[str, Any]:
    history.delete_by_id(record_id, owner_id)
    return {"ok": True, "id": record_id}
