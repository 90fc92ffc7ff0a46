"""
utils/qr_config.py
────────────────────────────────────────────
Render-Einstellungen (Größe, Farben, Fehlerkorrektur)
für QR-Codes.

Alle Standardwerte werden hier zentral gesetzt:
fehlende oder ungültige Angaben fallen still auf den
Standard zurück, es wird nie ein Fehler ausgelöst.
────────────────────────────────────────────
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

# ─────────────────────────────────────────────
# 🎨 STANDARDWERTE
# ─────────────────────────────────────────────
DEFAULT_SIZE = 300
MIN_SIZE = 50
MAX_SIZE = 2000
SIZE_CHOICES = (200, 300, 400, 500)

DEFAULT_COLOR = "000000"
DEFAULT_BACKGROUND = "ffffff"

DEFAULT_ERROR_CORRECTION = "M"
ERROR_CORRECTION_LEVELS: Dict[str, str] = {
    "L": "Low (7%)",
    "M": "Medium (15%)",
    "Q": "Quartile (25%)",
    "H": "High (30%)",
}

_HEX_COLOR = re.compile(r"^[0-9a-f]{6}$")


@dataclass(frozen=True)
class NormalizedCustomization:
    size: int = DEFAULT_SIZE
    color: str = DEFAULT_COLOR
    background_color: str = DEFAULT_BACKGROUND
    error_correction: str = DEFAULT_ERROR_CORRECTION

    def as_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "color": self.color,
            "backgroundColor": self.background_color,
            "errorCorrection": self.error_correction,
        }


def _read(source: Any, snake: str, camel: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        value = source.get(snake)
        return source.get(camel) if value is None else value
    return getattr(source, snake, None)


def normalize_size(raw: Any) -> int:
    if raw is None or isinstance(raw, bool) or raw == "":
        return DEFAULT_SIZE
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_SIZE
    if math.isnan(value):
        return DEFAULT_SIZE
    if value <= MIN_SIZE:
        return MIN_SIZE
    if value >= MAX_SIZE:
        return MAX_SIZE
    return int(value)


def normalize_color(raw: Any, default: str) -> str:
    if raw is None:
        return default
    value = str(raw).strip().lower()
    if value.startswith("#"):
        value = value[1:]
    return value if _HEX_COLOR.match(value) else default


def normalize_error_correction(raw: Any) -> str:
    value = str(raw or "").strip().upper()
    return value if value in ERROR_CORRECTION_LEVELS else DEFAULT_ERROR_CORRECTION


# ─────────────────────────────────────────────
# 🧠 FUNKTION: Einstellungen normalisieren
# ─────────────────────────────────────────────
def normalize(customization: Optional[Any] = None) -> NormalizedCustomization:
    """
    Füllt Standardwerte auf und prüft Wertebereiche.
    Akzeptiert ein Mapping (camelCase oder snake_case), ein Objekt
    mit passenden Attributen oder None.
    """
    if isinstance(customization, NormalizedCustomization):
        return customization

    return NormalizedCustomization(
        size=normalize_size(_read(customization, "size", "size")),
        color=normalize_color(_read(customization, "color", "color"), DEFAULT_COLOR),
        background_color=normalize_color(
            _read(customization, "background_color", "backgroundColor"), DEFAULT_BACKGROUND
        ),
        error_correction=normalize_error_correction(
            _read(customization, "error_correction", "errorCorrection")
        ),
    )
