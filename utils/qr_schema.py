# utils/qr_schema.py
"""
Definiert die Felder jedes QR-Typs und den FieldSet-Datensatz,
aus dem der Encoder den Payload-String baut.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


# ✅ Felder pro QR-Typ (Schlüssel wie im Formular / in der API)
QR_SCHEMAS: Dict[str, Dict[str, List[str]]] = {
    "text": {
        "required": [],
        "optional": ["value"]
    },
    "url": {
        "required": [],
        "optional": ["value"]
    },
    "phone": {
        "required": ["value"]
    },
    "sms": {
        "required": ["phoneNumber"],
        "optional": ["message"]
    },
    "email": {
        "required": ["emailTo"],
        "optional": ["subject", "body"]
    },
    "wifi": {
        "required": ["ssid"],
        "optional": ["password", "security", "hidden"]
    },
    "vcard": {
        "required": ["name"],
        "optional": ["phone", "email"]
    },
}

SUPPORTED_KINDS = tuple(QR_SCHEMAS)
DEFAULT_KIND = "text"

# Hauptfeld je Typ – wird z. B. aus der Bulk-Spalte "content" befüllt
PRIMARY_FIELDS: Dict[str, str] = {
    "text": "value",
    "url": "value",
    "phone": "value",
    "sms": "phoneNumber",
    "email": "emailTo",
    "wifi": "ssid",
    "vcard": "name",
}

# 🧾 Auswahlliste für Clients
QR_TYPES: List[Dict[str, str]] = [
    {"value": "text", "label": "Text", "description": "Plain text content"},
    {"value": "url", "label": "URL", "description": "Website links"},
    {"value": "email", "label": "Email", "description": "Pre-composed emails"},
    {"value": "sms", "label": "SMS", "description": "Text messages"},
    {"value": "phone", "label": "Phone", "description": "Direct dial numbers"},
    {"value": "wifi", "label": "Wi-Fi", "description": "Network credentials"},
    {"value": "vcard", "label": "Contact", "description": "Digital business cards"},
]


def normalize_kind(kind: Any) -> str:
    """Bringt einen Typnamen in Kleinschreibung; unbekannte Typen bleiben erhalten."""
    return str(kind or "").strip().lower()


def fields_for(kind: str) -> List[str]:
    schema = QR_SCHEMAS.get(normalize_kind(kind), {})
    return [*schema.get("required", []), *schema.get("optional", [])]


@dataclass(frozen=True)
class FieldSet:
    """Ein QR-Auftrag: Typ, Feldwerte und optionaler Titel."""

    kind: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    title: Optional[str] = None

    def get(self, name: str) -> str:
        value = self.fields.get(name) if self.fields else None
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def missing_required(self) -> List[str]:
        schema = QR_SCHEMAS.get(normalize_kind(self.kind), {})
        return [name for name in schema.get("required", []) if not self.get(name)]
