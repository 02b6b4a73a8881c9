from datetime import timedelta

import pytest
from playhouse.db_url import parse

from core.security import (
    TokenPayload,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from core.settings import Settings, parse_duration


def test_password_hash_roundtrip():
    hashed = hash_password("hunter22", rounds=4)

    assert hashed != "hunter22"
    assert verify_password("hunter22", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_against_garbage_hash_is_false():
    assert not verify_password("hunter22", "not-a-bcrypt-hash")


def test_token_carries_user_claims():
    payload = TokenPayload(userId=7, username="alice", email="alice@example.com")
    token = create_access_token(payload, "secret", timedelta(minutes=5))

    assert decode_access_token(token, "secret") == payload


def test_expired_token_is_rejected():
    payload = TokenPayload(userId=7, username="alice", email="alice@example.com")
    token = create_access_token(payload, "secret", timedelta(seconds=-10))

    assert decode_access_token(token, "secret") is None


def test_token_signed_with_other_secret_is_rejected():
    payload = TokenPayload(userId=7, username="alice", email="alice@example.com")
    token = create_access_token(payload, "secret", timedelta(minutes=5))

    assert decode_access_token(token, "other") is None
    assert decode_access_token("garbage", "secret") is None


@pytest.mark.parametrize("value,expected", [
    ("7d", timedelta(days=7)),
    ("12h", timedelta(hours=12)),
    ("30m", timedelta(minutes=30)),
    ("45s", timedelta(seconds=45)),
    ("3600", timedelta(seconds=3600)),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


def test_invalid_jwt_lifetime_is_rejected():
    with pytest.raises(ValueError):
        Settings(jwt_expires_in="forever")


def test_database_dsn_from_parts():
    s = Settings(database_url=None, db_host="db", db_port=5433, db_name="bf6", db_user="u", db_password="p")
    assert s.database_dsn == "postgresql://u:p@db:5433/bf6"


def test_database_dsn_escapes_credentials():
    s = Settings(
        database_url=None,
        db_host="db",
        db_port=5433,
        db_name="bf6",
        db_user="svc@corp",
        db_password="p@ss/wo:rd#1",
    )

    parsed = parse(s.database_dsn)
    assert parsed["host"] == "db"
    assert parsed["port"] == 5433
    assert parsed["database"] == "bf6"
    assert parsed["user"] == "svc@corp"
    assert parsed["password"] == "p@ss/wo:rd#1"
