# =============================================================================
# 🧾 utils/render_request.py
# -----------------------------------------------------------------------------
# Baut die vollständige Anfrage für den externen QR-Renderer.
# Reine Beschreibung – der eigentliche Abruf liegt in utils/qr_generator.py
# =============================================================================

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from utils.errors import EmptyPayload
from utils.qr_config import NormalizedCustomization, normalize
from utils.qr_engine import percent_encode

load_dotenv()

RENDER_BASE_URL: str = os.getenv(
    "QR_RENDER_BASE_URL", "https://api.qrserver.com/v1/create-qr-code/"
)

FORMATS = {"png": "image/png", "svg": "image/svg+xml"}
DEFAULT_FORMAT = "png"


@dataclass(frozen=True)
class RenderRequest:
    data: str  # bereits prozentkodiert
    size: str
    color: str
    bgcolor: str
    ecc: str
    format: Optional[str] = None
    base_url: str = RENDER_BASE_URL

    def params(self) -> List[Tuple[str, str]]:
        params = [
            ("size", self.size),
            ("data", self.data),
            ("color", self.color),
            ("bgcolor", self.bgcolor),
            ("ecc", self.ecc),
        ]
        if self.format:
            params.append(("format", self.format))
        return params

    @property
    def url(self) -> str:
        # data ist schon kodiert, daher kein urlencode() (sonst doppelt kodiert)
        query = "&".join(f"{key}={value}" for key, value in self.params())
        separator = "&" if "?" in self.base_url else "?"
        return f"{self.base_url}{separator}{query}"

    @property
    def file_extension(self) -> str:
        return self.format or DEFAULT_FORMAT

    @property
    def media_type(self) -> str:
        return FORMATS[self.file_extension]


def build_render_request(
    payload: str,
    customization: Optional[NormalizedCustomization] = None,
    format: str = DEFAULT_FORMAT,
    base_url: Optional[str] = None,
) -> RenderRequest:
    """
    Kombiniert Payload und Design zu einer Renderer-Anfrage.
    Wirft EmptyPayload, wenn es nichts zu rendern gibt.
    """
    if not payload:
        raise EmptyPayload()

    style = normalize(customization)
    fmt = str(format or "").strip().lower()

    return RenderRequest(
        data=percent_encode(payload),
        size=f"{style.size}x{style.size}",
        color=style.color,
        bgcolor=style.background_color,
        ecc=style.error_correction,
        format="svg" if fmt == "svg" else None,
        base_url=base_url or RENDER_BASE_URL,
    )
