# =============================================================================
# 🔐 utils/encryption.py
# Verschlüsselung gespeicherter Formularfelder (AES-256-GCM)
# Betrifft z. B. WLAN-Passwörter im Verlauf
# =============================================================================

from __future__ import annotations
import os
import json
import base64
import binascii
import logging
from typing import Dict, Any, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes

logger = logging.getLogger(__name__)

KEY_BYTES = 32
IV_BYTES = 12
DEFAULT_KDF_ITERATIONS = 480000
# Fester Salt nur für Passphrasen aus ENCRYPTION_KEY
PASSPHRASE_SALT = b"qr-payload-studio/fields"

# =============================================================================
# 🔑 Encryption Key Management
# =============================================================================

def kdf_iterations() -> int:
    return int(os.getenv("ENCRYPTION_KDF_ITERATIONS", str(DEFAULT_KDF_ITERATIONS)))


def derive_key(secret: str, salt: bytes, iterations: int) -> bytes:
    """Leitet einen AES-256-Schlüssel aus einer Passphrase ab."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_BYTES,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(secret.encode())


def get_encryption_key() -> bytes:
    """
    Lädt den Encryption Key aus der Umgebungsvariable.
    - 64 Hex-Zeichen: wird direkt als AES-256-Key benutzt
    - sonst: Passphrase, einmalig per PBKDF2 gestreckt
    - fehlt: temporärer Zufalls-Key
    """
    env_key = os.getenv("ENCRYPTION_KEY")

    if env_key:
        try:
            key_bytes = bytes.fromhex(env_key)
        except ValueError:
            key_bytes = b""
        if len(key_bytes) == KEY_BYTES:
            return key_bytes
        return derive_key(env_key, PASSPHRASE_SALT, kdf_iterations())

    new_key = AESGCM.generate_key(bit_length=256)
    logger.warning(
        "⚠️ ENCRYPTION_KEY nicht gesetzt – temporärer Key erzeugt. "
        f"Für dauerhafte Daten in .env eintragen: ENCRYPTION_KEY={new_key.hex()}"
    )
    return new_key


# =============================================================================
# 🔐 AES-256-GCM Encryption/Decryption
# =============================================================================

class FieldEncryption:
    """
    Verschlüsselt und entschlüsselt Feld-Dictionaries mit AES-256-GCM.
    Ein Key pro Prozess, jeder Datensatz erhält seinen eigenen zufälligen IV.
    """

    def __init__(self, key: Optional[bytes] = None):
        key = key or get_encryption_key()
        if len(key) != KEY_BYTES:
            raise ValueError(f"Encryption key must be {KEY_BYTES} bytes, got {len(key)}")
        self._aesgcm = AESGCM(key)

    def encrypt(self, data: Dict[str, Any]) -> str:
        """
        Verschlüsselt ein Dictionary zu einem Base64-String.
        Format: base64(iv || ciphertext || tag)
        """
        if not data:
            return ""

        iv = os.urandom(IV_BYTES)
        plaintext = json.dumps(data, ensure_ascii=False).encode("utf-8", "surrogatepass")
        ciphertext = self._aesgcm.encrypt(iv, plaintext, None)

        return base64.b64encode(iv + ciphertext).decode("ascii")

    def decrypt(self, encrypted_data: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Entschlüsselt einen Base64-String zurück zu einem Dictionary.
        Gibt None zurück, wenn der Inhalt nicht lesbar ist (z. B. anderer Key).
        """
        if not encrypted_data:
            return None

        try:
            combined = base64.b64decode(encrypted_data.encode("ascii"), validate=True)
            iv, ciphertext = combined[:IV_BYTES], combined[IV_BYTES:]

            plaintext = self._aesgcm.decrypt(iv, ciphertext, None)
            return json.loads(plaintext.decode("utf-8", "surrogatepass"))
        except (InvalidTag, ValueError, binascii.Error) as e:
            logger.warning(f"❌ Entschlüsselung fehlgeschlagen: {e}")
            return None


# =============================================================================
# 🔧 Simple API (Singleton Pattern)
# =============================================================================

_encryption_instance: Optional[FieldEncryption] = None


def get_encryptor() -> FieldEncryption:
    """Gibt die Singleton-Instanz des Encryptors zurück."""
    global _encryption_instance
    if _encryption_instance is None:
        _encryption_instance = FieldEncryption()
    return _encryption_instance


def encrypt_fields(data: Dict[str, Any]) -> str:
    return get_encryptor().encrypt(data)


def decrypt_fields(encrypted_data: Optional[str]) -> Optional[Dict[str, Any]]:
    return get_encryptor().decrypt(encrypted_data)
