import sqlite3

import pytest

from ledgerbook.company import FIELDS, CompanyProfile, ProfileError

SCHEMA = """
CREATE TABLE userInformation (
    id INTEGER PRIMARY KEY,
    address TEXT,
    post_number TEXT,
    vat_number TEXT,
    mobile TEXT,
    phone TEXT,
    email TEXT,
    website TEXT,
    accountNumber TEXT,
    sort_code TEXT,
    bank_name TEXT,
    bank_address TEXT
)
"""


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    yield conn
    conn.close()


def _info(**changes):
    info = {field: f"value of {field}" for field in FIELDS}
    info.update(changes)
    return info


def test_load_without_profile_is_empty(connection):
    assert CompanyProfile(connection).load() == {}


def test_ensure_default_inserts_placeholder(connection):
    profile = CompanyProfile(connection)
    profile.ensure_default()
    loaded = profile.load()
    assert loaded["address"] == "123 Main St"
    assert loaded["email"] == "user@example.com"
    assert loaded["bank_name"] == "Example Bank"
    assert set(loaded) == set(FIELDS)


def test_ensure_default_is_idempotent(connection):
    profile = CompanyProfile(connection)
    profile.ensure_default()
    profile.ensure_default()
    count = connection.execute("SELECT COUNT(*) FROM userInformation").fetchone()[0]
    assert count == 1


def test_ensure_default_keeps_existing_profile(connection):
    profile = CompanyProfile(connection)
    profile.ensure_default()
    profile.save(_info(address="Harbour Road"))
    profile.ensure_default()
    assert profile.load()["address"] == "Harbour Road"


def test_save_round_trip(connection):
    profile = CompanyProfile(connection)
    profile.ensure_default()
    info = _info(bank_address="Line one\nLine two")
    profile.save(info)
    assert profile.load() == info


def test_save_rejects_unknown_field(connection):
    profile = CompanyProfile(connection)
    profile.ensure_default()
    with pytest.raises(ProfileError):
        profile.save(_info(fax="nothing"))


def test_save_rejects_missing_field(connection):
    profile = CompanyProfile(connection)
    profile.ensure_default()
    info = _info()
    del info["website"]
    with pytest.raises(ProfileError):
        profile.save(info)


def test_missing_table_raises():
    conn = sqlite3.connect(":memory:")
    profile = CompanyProfile(conn)
    with pytest.raises(ProfileError):
        profile.load()
    with pytest.raises(ProfileError):
        profile.ensure_default()
    conn.close()


def test_numeric_values_load_as_text(connection):
    connection.execute(
        "INSERT INTO userInformation (id, address, post_number) VALUES (1, NULL, 4321)"
    )
    loaded = CompanyProfile(connection).load()
    assert loaded["address"] == ""
    assert loaded["post_number"] == "4321"