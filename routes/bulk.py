# routes/bulk.py
# =============================================================================
# 📥 Bulk-Generator – CSV-Vorlage, Vorschau, Massenspeicherung
# =============================================================================

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field

from auth_utils import require_owner_id
from routes.history import get_history
from utils.bulk_ingest import BULK_TEMPLATE, BULK_TEMPLATE_FILENAME, parse
from utils.bulk_save import save_bulk_rows
from utils.qr_save import HistoryGateway

router = APIRouter(prefix="/bulk", tags=["Bulk QR"])


class BulkIn(BaseModel):
    text: str = Field(..., description="CSV: type,content[,title,...]")


@router.get("/template")
def download_template() -> Response:
    return Response(
        content=BULK_TEMPLATE,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{BULK_TEMPLATE_FILENAME}"'},
    )


@router.post("/parse")
def parse_bulk(body: BulkIn) -> dict[str, Any]:
    result = parse(body.text)
    return {
        "count": len(result.rows),
        "preview": [row.to_dict() for row in result.preview()],
        "errors": [error.to_dict() for error in result.errors],
        "message": f"Parsed {len(result.rows)} items",
    }


@router.post("/generate")
def generate_bulk(
    body: BulkIn,
    owner_id: int = Depends(require_owner_id),
    history: HistoryGateway = Depends(get_history),
) -> dict[str, Any]:
    result = parse(body.text)
    outcome = save_bulk_rows(history, owner_id, result.rows)
    return {
        **outcome.to_dict(),
        "errors": [error.to_dict() for error in result.errors],
        "message": f"Generated {outcome.succeeded} QR codes",
    }
