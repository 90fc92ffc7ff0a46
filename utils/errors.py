# =============================================================================
# ⚠️ utils/errors.py
# Fehlerarten der Payload-Engine und der Verlaufsspeicherung
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


class PayloadError(Exception):
    """Basisklasse für alle fachlichen Fehler dieses Projekts."""


class EmptyPayload(PayloadError):
    """Der kodierte Inhalt ist leer – es gibt nichts zu rendern."""

    def __init__(self, message: str = "Nothing to render: the encoded payload is empty") -> None:
        super().__init__(message)


class MissingRequiredColumns(PayloadError):
    """Der CSV-Header enthält nicht alle Pflichtspalten."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        quoted = " and ".join(f"'{name}'" for name in self.missing)
        noun = "columns" if len(self.missing) > 1 else "column"
        super().__init__(f"CSV must include {quoted} {noun}")


class Unauthenticated(PayloadError):
    def __init__(self, message: str = "Must be logged in") -> None:
        super().__init__(message)


class NotFoundOrForbidden(PayloadError):
    def __init__(self, message: str = "QR code not found or access denied") -> None:
        super().__init__(message)


class RendererUnavailable(PayloadError):
    """Der externe QR-Renderer hat nicht (oder fehlerhaft) geantwortet."""


@dataclass(frozen=True)
class RowError:
    """Fehler einer einzelnen Bulk-Zeile (bricht den Batch nie ab)."""

    row_index: int
    reason: str

    def to_dict(self) -> dict:
        return {"row_index": self.row_index, "reason": self.reason}
