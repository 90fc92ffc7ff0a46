# =============================================================================
# 📦 utils/bulk_save.py
# -----------------------------------------------------------------------------
# Speichert geparste Bulk-Zeilen nacheinander.
# Best effort: scheitert eine Zeile, laufen die übrigen weiter.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from utils.bulk_ingest import BulkRow
from utils.errors import Unauthenticated
from utils.qr_engine import encode
from utils.qr_save import HistoryGateway

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass
class BatchOutcome:
    total: int
    succeeded: int = 0
    saved_ids: List[int] = field(default_factory=list)
    failed_rows: List[int] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "saved_ids": list(self.saved_ids),
            "failed_rows": list(self.failed_rows),
        }


def save_bulk_rows(
    gateway: HistoryGateway,
    owner_id: Optional[int],
    rows: Sequence[BulkRow],
) -> BatchOutcome:
    """Kodiert und speichert jede Zeile einzeln; kein Gesamt-Rollback."""
    if owner_id is None:
        raise Unauthenticated()

    outcome = BatchOutcome(total=len(rows))
    for row in rows:
        field_set = row.to_field_set()
        try:
            record_id = gateway.insert(
                owner_id,
                row.kind,
                encode(field_set),
                title=field_set.title,
                fields=field_set.fields,
            )
        except SQLAlchemyError:
            logger.exception(f"⚠️ Bulk-Zeile {row.row_index} konnte nicht gespeichert werden")
            outcome.failed_rows.append(row.row_index)
            continue
        outcome.succeeded += 1
        outcome.saved_ids.append(record_id)

    logger.info(f"✅ Bulk-Speicherung: {outcome.succeeded}/{outcome.total} QR-Codes gespeichert")
    return outcome
