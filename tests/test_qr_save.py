import json

import pytest
from sqlalchemy.exc import OperationalError

from models.saved_payload import KIND_LENGTH, TITLE_LENGTH, SavedPayload
from utils.bulk_ingest import parse
from utils.bulk_save import save_bulk_rows
from utils.errors import NotFoundOrForbidden, Unauthenticated
from utils.qr_config import normalize
from utils.qr_save import HISTORY_LIMIT, HistoryGateway


def test_insert_and_list_newest_first(gateway, make_user):
    owner = make_user()
    first = gateway.insert(owner.id, "text", "eins")
    second = gateway.insert(owner.id, "url", "https://zwei.de", title="Zwei")

    rows = gateway.list_latest(owner.id)
    assert [r.id for r in rows] == [second, first]
    assert rows[0].title == "Zwei"


def test_list_is_owner_scoped_and_capped(gateway, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    for i in range(55):
        gateway.insert(alice.id, "text", f"t{i}")
    gateway.insert(bob.id, "text", "bob")

    rows = gateway.list_latest(alice.id)
    assert len(rows) == 50
    assert rows[0].encoded_content == "t54"
    assert all(r.owner_id == alice.id for r in rows)
    assert len(gateway.list_latest(alice.id, limit=5)) == 5
    assert gateway.list_latest(None) == []


def test_fields_are_encrypted_at_rest(gateway, make_user, db):
    owner = make_user()
    record_id = gateway.insert(
        owner.id,
        "wifi",
        "WIFI:T:WPA;S:Home;P:geheim;H:false;;",
        fields={"ssid": "Home", "password": "geheim"},
        customization=normalize({"size": 400}),
    )
    record = db.get(SavedPayload, record_id)
    assert "geheim" not in (record.encrypted_fields or "")
    assert record.get_fields() == {"ssid": "Home", "password": "geheim"}
    assert json.loads(record.customization)["size"] == 400
    assert record.to_dict()["customization"]["backgroundColor"] == "ffffff"


def test_insert_requires_owner(gateway):
    with pytest.raises(Unauthenticated):
        gateway.insert(None, "text", "x")


def test_delete_only_by_owner(gateway, make_user):
    alice, bob = make_user("alice"), make_user("bob")
    record_id = gateway.insert(alice.id, "text", "privat")

    with pytest.raises(NotFoundOrForbidden):
        gateway.delete_by_id(record_id, bob.id)
    with pytest.raises(NotFoundOrForbidden):
        gateway.delete_by_id(9999, alice.id)

    gateway.delete_by_id(record_id, alice.id)
    assert gateway.list_latest(alice.id) == []
    with pytest.raises(NotFoundOrForbidden):
        gateway.delete_by_id(record_id, alice.id)


def test_bulk_rows_are_encoded_and_saved(gateway, make_user):
    owner = make_user()
    result = parse("type,content,title\ntext,Hello,Sample\nphone,+4930,\nwifi,Home,WLAN")

    outcome = save_bulk_rows(gateway, owner.id, result.rows)
    assert (outcome.succeeded, outcome.total, outcome.failed) == (3, 3, 0)

    saved = {r.kind: r for r in gateway.list_latest(owner.id)}
    assert saved["phone"].encoded_content == "tel:+4930"
    assert saved["phone"].title == "Bulk phone"
    assert saved["wifi"].encoded_content == "WIFI:T:WPA;S:Home;P:;H:false;;"
    assert saved["text"].title == "Sample"


class FlakyGateway(HistoryGateway):
    """Lässt jede zweite Speicherung scheitern."""

    def __init__(self, db):
        super().__init__(db)
        self.calls = 0

    def insert(self, *args, **kwargs):
        self.calls += 1
        if self.calls % 2 == 0:
            raise OperationalError("INSERT", {}, Exception("database is locked"))
        return super().insert(*args, **kwargs)


def test_bulk_save_continues_after_failures(db, make_user):
    owner = make_user()
    gateway = FlakyGateway(db)
    rows = parse("type,content\ntext,a\ntext,b\ntext,c\ntext,d").rows

    outcome = save_bulk_rows(gateway, owner.id, rows)
    assert outcome.total == 4
    assert outcome.succeeded == 2
    assert outcome.failed_rows == [1, 3]
    assert [r.encoded_content for r in gateway.list_latest(owner.id)] == ["c", "a"]


def test_bulk_save_requires_owner(gateway):
    with pytest.raises(Unauthenticated):
        save_bulk_rows(gateway, None, [])


def test_listing_full_history_never_derives_keys(gateway, make_user, monkeypatch):
    from utils import encryption

    monkeypatch.delenv("ENCRYPTION_KDF_ITERATIONS", raising=False)
    owner = make_user()
    for i in range(HISTORY_LIMIT):
        gateway.insert(owner.id, "wifi", f"WIFI:S:n{i};;", fields={"ssid": f"n{i}", "password": "pw"})

    calls = []
    monkeypatch.setattr(encryption, "derive_key", lambda *a: calls.append(a) or b"x" * 32)
    items = [row.to_dict() for row in gateway.list_latest(owner.id)]

    assert len(items) == HISTORY_LIMIT
    assert items[0]["fields"] == {"ssid": f"n{HISTORY_LIMIT - 1}", "password": "pw"}
    assert calls == []


def test_long_kind_and_title_are_cut_to_column_width(gateway, make_user, db):
    owner = make_user()
    record_id = gateway.insert(owner.id, "K" * 40, "inhalt", title="t" * 300)

    record = db.get(SavedPayload, record_id)
    assert record.kind == "k" * KIND_LENGTH
    assert record.title == "t" * TITLE_LENGTH
