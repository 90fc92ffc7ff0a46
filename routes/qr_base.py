# routes/qr_base.py
# =============================================================================
# 🚀 Zentrale QR-Routen
# - /qr/types    Typauswahl
# - /qr/encode   FieldSet → Payload + Renderer-URL
# - /qr/download Bild (PNG/SVG) über den externen Renderer
# =============================================================================

from __future__ import annotations

import time
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from utils.qr_config import ERROR_CORRECTION_LEVELS, SIZE_CHOICES, normalize
from utils.qr_engine import encode
from utils.qr_generator import fetch_qr_image, get_render_client
from utils.qr_schema import QR_TYPES, FieldSet
from utils.render_request import build_render_request

router = APIRouter(prefix="/qr", tags=["QR-Codes"])


# =============================================================================
# ✅ Request-Modelle (auch von /qr/history genutzt)
# =============================================================================
class CustomizationIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: Optional[Any] = None
    color: Optional[str] = None
    background_color: Optional[str] = Field(default=None, alias="backgroundColor")
    error_correction: Optional[str] = Field(default=None, alias="errorCorrection")


class FieldSetIn(BaseModel):
    kind: str = Field(default="text", description="text, url, phone, sms, email, wifi, vcard")
    fields: dict[str, Any] = Field(default_factory=dict)
    title: Optional[str] = None
    customization: Optional[CustomizationIn] = None

    def to_field_set(self) -> FieldSet:
        return FieldSet(kind=self.kind, fields=dict(self.fields), title=self.title)


class DownloadIn(FieldSetIn):
    format: str = Field(default="png", description="png oder svg")


# =============================================================================
# ✅ Routen
# =============================================================================
@router.get("/types")
def list_types() -> dict[str, Any]:
    return {
        "types": QR_TYPES,
        "sizes": list(SIZE_CHOICES),
        "error_correction": ERROR_CORRECTION_LEVELS,
    }


@router.post("/encode")
def encode_qr(body: FieldSetIn) -> dict[str, Any]:
    """Leerer Payload = noch nichts anzuzeigen, kein Fehler."""
    payload = encode(body.to_field_set())
    style = normalize(body.customization)

    render_url = svg_url = None
    if payload:
        render_url = build_render_request(payload, style, "png").url
        svg_url = build_render_request(payload, style, "svg").url

    return {
        "kind": body.kind,
        "title": body.title,
        "payload": payload,
        "ready": bool(payload),
        "customization": style.as_dict(),
        "render_url": render_url,
        "svg_url": svg_url,
    }


@router.post("/download")
async def download_qr(
    body: DownloadIn,
    client: httpx.AsyncClient = Depends(get_render_client),
) -> Response:
    payload = encode(body.to_field_set())
    render_request = build_render_request(payload, normalize(body.customization), body.format)

    image = await fetch_qr_image(client, render_request)
    filename = f"qr-code-{int(time.time() * 1000)}.{render_request.file_extension}"
    return Response(
        content=image,
        media_type=render_request.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
