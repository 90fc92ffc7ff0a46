# =============================================================================
# 🧠 QR-Bild abrufen – externer Renderer
# -----------------------------------------------------------------------------
# Holt das fertige QR-Bild (PNG oder SVG) für eine RenderRequest.
# =============================================================================

from __future__ import annotations

import logging
import os
from typing import AsyncIterator

import httpx

from utils.errors import RendererUnavailable
from utils.render_request import RenderRequest

# ---------------------------------------------------------------------------
# ⚙️ Logging konfigurieren
# ---------------------------------------------------------------------------
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

RENDER_TIMEOUT = float(os.getenv("QR_RENDER_TIMEOUT", "10"))


async def get_render_client() -> AsyncIterator[httpx.AsyncClient]:
    """FastAPI-Dependency: ein HTTP-Client pro Anfrage."""
    async with httpx.AsyncClient(timeout=RENDER_TIMEOUT, follow_redirects=True) as client:
        yield client


async def fetch_qr_image(client: httpx.AsyncClient, render_request: RenderRequest) -> bytes:
    """
    Ruft den Renderer auf und gibt die Bild-Bytes zurück.
    Keine automatischen Wiederholungen – Fehler gehen an den Aufrufer.
    """
    try:
        response = await client.get(render_request.url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning(f"⚠️ Renderer nicht erreichbar: {exc}")
        raise RendererUnavailable(f"QR renderer request failed: {exc}") from exc

    if not response.content:
        logger.warning(f"⚠️ Leere Antwort vom Renderer ({render_request.file_extension})")
        raise RendererUnavailable("QR renderer returned an empty image")

    logger.info(f"✅ QR-Bild geladen ({len(response.content)} Bytes, {render_request.file_extension})")
    return response.content
