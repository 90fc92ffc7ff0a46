"""
utils/qr_engine.py
────────────────────────────────────────────
Zentrale Payload-Engine für QR-Codes.
- Unterstützt: Text, URL, Telefon, SMS, E-Mail, Wi-Fi, vCard
- Reine Funktion: FieldSet → String, ohne Seiteneffekte
- Fehlende Pflichtfelder ergeben "" (noch nichts zu rendern)
────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Callable, Dict, List
from urllib.parse import quote

from utils.qr_schema import DEFAULT_KIND, FieldSet, normalize_kind

# encodeURIComponent: diese Zeichen bleiben unkodiert
URI_COMPONENT_SAFE = "-_.!~*'()"

WIFI_RESERVED = '\\;,":'
WIFI_DEFAULT_SECURITY = "WPA"
WIFI_SECURITY_ALIASES: Dict[str, str] = {
    "wpa": "WPA",
    "wpa2": "WPA",
    "wep": "WEP",
    "nopass": "nopass",
    "none": "nopass",
    "open": "nopass",
}
TRUTHY = {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# 🧩 Escaping-Helfer
# ---------------------------------------------------------------------------
def percent_encode(value: str) -> str:
    """URI-Komponenten-Kodierung eines einzelnen Werts (Leerzeichen → %20)."""
    # einzelne Surrogate (nicht UTF-8-fähig) werden zu "?"
    return quote(value, safe=URI_COMPONENT_SAFE, errors="replace")


def escape_wifi(value: str) -> str:
    """Maskiert \\ ; , \" : für die WIFI:-Syntax mit einem Backslash."""
    return "".join(f"\\{ch}" if ch in WIFI_RESERVED else ch for ch in value)


def escape_vcard(value: str) -> str:
    """Maskiert Backslash, Komma und Semikolon; Zeilenumbrüche werden zu \\n."""
    value = value.replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,")
    return value.replace("\r\n", "\\n").replace("\r", "\\n").replace("\n", "\\n")


def wifi_security(raw: str) -> str:
    value = raw.strip()
    if not value:
        return WIFI_DEFAULT_SECURITY
    return WIFI_SECURITY_ALIASES.get(value.lower(), escape_wifi(value))


# ---------------------------------------------------------------------------
# 🔀 Ein Builder pro Typ
# ---------------------------------------------------------------------------
def _encode_text(fs: FieldSet) -> str:
    return fs.get("value")


def _encode_phone(fs: FieldSet) -> str:
    value = fs.get("value")
    return f"tel:{value}" if value else ""


def _encode_sms(fs: FieldSet) -> str:
    phone_number = fs.get("phoneNumber")
    if not phone_number:
        return ""
    message = fs.get("message")
    if message:
        return f"sms:{phone_number}?body={percent_encode(message)}"
    return f"sms:{phone_number}"


def _encode_email(fs: FieldSet) -> str:
    email_to = fs.get("emailTo")
    if not email_to:
        return ""
    params: List[str] = []
    subject, body = fs.get("subject"), fs.get("body")
    if subject:
        params.append(f"subject={percent_encode(subject)}")
    if body:
        params.append(f"body={percent_encode(body)}")
    mailto = f"mailto:{email_to}"
    if params:
        mailto += "?" + "&".join(params)
    return mailto


def _encode_wifi(fs: FieldSet) -> str:
    ssid = fs.get("ssid")
    if not ssid:
        return ""
    security = wifi_security(fs.get("security"))
    hidden = "true" if fs.get("hidden").strip().lower() in TRUTHY else "false"
    return (
        f"WIFI:T:{security};"
        f"S:{escape_wifi(ssid)};"
        f"P:{escape_wifi(fs.get('password'))};"
        f"H:{hidden};;"
    )


def _encode_vcard(fs: FieldSet) -> str:
    name = fs.get("name")
    if not name:
        return ""
    lines = ["BEGIN:VCARD", "VERSION:3.0", f"FN:{escape_vcard(name)}"]
    phone, email = fs.get("phone"), fs.get("email")
    if phone:
        lines.append(f"TEL:{escape_vcard(phone)}")
    if email:
        lines.append(f"EMAIL:{escape_vcard(email)}")
    lines.append("END:VCARD")
    return "\n".join(lines)


ENCODERS: Dict[str, Callable[[FieldSet], str]] = {
    "text": _encode_text,
    "url": _encode_text,
    "phone": _encode_phone,
    "sms": _encode_sms,
    "email": _encode_email,
    "wifi": _encode_wifi,
    "vcard": _encode_vcard,
}


def encode(field_set: FieldSet) -> str:
    """
    Erzeugt den Payload-String, den ein QR-Scanner später dekodiert.
    Unbekannte Typen werden wie Text behandelt.
    """
    builder = ENCODERS.get(normalize_kind(field_set.kind), ENCODERS[DEFAULT_KIND])
    return builder(field_set)
