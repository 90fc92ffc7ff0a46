# =============================================================================
# 📦 SavedPayload Model – Verlaufseintrag eines gespeicherten QR-Payloads
# =============================================================================

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TYPE_CHECKING

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base

if TYPE_CHECKING:
    from models.user import User

KIND_LENGTH = 20
TITLE_LENGTH = 255


class SavedPayload(Base):
    """
    Ein gespeicherter QR-Payload.
    Wird nur angelegt und gelöscht, nie verändert.

    🔐 Die Formularfelder (z. B. WLAN-Passwort) liegen verschlüsselt
    in 'encrypted_fields'; der fertige Payload bleibt lesbar.
    """
    __tablename__ = "saved_payloads"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    owner: Mapped["User"] = relationship("User", back_populates="saved_payloads")

    kind: Mapped[str] = mapped_column(String(KIND_LENGTH), nullable=False)  # text, url, wifi, vcard, ...
    encoded_content: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(TITLE_LENGTH), nullable=True)

    encrypted_fields: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Verschlüsselte Formularfelder (AES-256-GCM)",
    )
    customization: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    # ---------------------------------------------------------------------
    # 🔐 Felder
    # ---------------------------------------------------------------------
    def get_fields(self) -> Optional[Dict[str, Any]]:
        from utils.encryption import decrypt_fields
        return decrypt_fields(self.encrypted_fields)

    def set_fields(self, fields: Optional[Dict[str, Any]]) -> None:
        from utils.encryption import encrypt_fields
        self.encrypted_fields = encrypt_fields(fields) if fields else None

    # ---------------------------------------------------------------------
    # 🎨 Design
    # ---------------------------------------------------------------------
    def get_customization(self) -> Optional[Dict[str, Any]]:
        if not self.customization:
            return None
        try:
            return json.loads(self.customization)
        except (json.JSONDecodeError, TypeError):
            return None

    def set_customization(self, customization: Optional[Dict[str, Any]]) -> None:
        self.customization = (
            json.dumps(customization, ensure_ascii=False) if customization else None
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "kind": self.kind,
            "encoded_content": self.encoded_content,
            "title": self.title,
            "fields": self.get_fields(),
            "customization": self.get_customization(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<SavedPayload(id={self.id}, kind='{self.kind}', owner={self.owner_id})>"
