import pytest

from utils import encryption
from utils.encryption import FieldEncryption, get_encryption_key


def test_round_trip_with_unique_ciphertexts():
    enc = FieldEncryption(key=b"k" * 32)
    data = {"ssid": "Büro", "password": "p;w"}

    first, second = enc.encrypt(data), enc.encrypt(data)
    assert first != second
    assert enc.decrypt(first) == data


def test_lone_surrogate_survives_round_trip():
    enc = FieldEncryption(key=b"k" * 32)
    assert enc.decrypt(enc.encrypt({"message": "a\ud800b"})) == {"message": "a\ud800b"}


def test_empty_values():
    enc = FieldEncryption(key=b"k" * 32)
    assert enc.encrypt({}) == ""
    assert enc.decrypt("") is None
    assert enc.decrypt(None) is None


def test_wrong_key_or_garbage_returns_none():
    token = FieldEncryption(key=b"a" * 32).encrypt({"x": 1})
    other = FieldEncryption(key=b"b" * 32)
    assert other.decrypt(token) is None
    assert other.decrypt("kein base64!") is None
    assert other.decrypt("AAAA") is None


def test_key_must_be_32_bytes():
    with pytest.raises(ValueError):
        FieldEncryption(key=b"zu kurz")


def test_hex_key_is_used_without_derivation(monkeypatch):
    calls = []
    monkeypatch.setattr(encryption, "derive_key", lambda *a: calls.append(a) or b"x" * 32)
    monkeypatch.setenv("ENCRYPTION_KEY", "ab" * 32)

    assert get_encryption_key() == bytes.fromhex("ab" * 32)
    assert calls == []


def test_passphrase_key_is_derived_once(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_KEY", "mein geheimes passwort")
    monkeypatch.setenv("ENCRYPTION_KDF_ITERATIONS", "1000")

    key = get_encryption_key()
    assert len(key) == 32
    assert key == get_encryption_key()

    calls = []
    real_derive = encryption.derive_key
    monkeypatch.setattr(
        encryption, "derive_key", lambda *a: calls.append(a) or real_derive(*a)
    )
    enc = FieldEncryption()
    for _ in range(5):
        assert enc.decrypt(enc.encrypt({"x": 1})) == {"x": 1}
    assert len(calls) == 1
