"""
LocalPros Backend — Security Helper Tests
===========================================

What:  Password hashing and signed access tokens.
"""

import uuid
from datetime import datetime, timedelta, timezone

from localpros.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    parse_bearer_token,
    verify_password,
)


class TestPasswords:
    def test_hash_roundtrip(self):
        stored = hash_password("secret123")
        assert stored != "secret123"
        assert verify_password("secret123", stored)
        assert not verify_password("secret124", stored)

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash_never_verifies(self):
        assert not verify_password("secret", "not-a-hash")
        assert not verify_password("secret", "zz$zz")
        assert not verify_password("secret", "")


class TestTokens:
    def test_token_roundtrip(self):
        user_id = uuid.uuid4()
        token, expires_at = create_access_token(user_id)
        assert decode_access_token(token) == user_id
        assert expires_at > datetime.now(timezone.utc)

    def test_expired_token_rejected(self):
        token, _ = create_access_token(uuid.uuid4(), expires_in=timedelta(seconds=-5))
        assert decode_access_token(token) is None

    def test_tampered_token_rejected(self):
        token, _ = create_access_token(uuid.uuid4())
        payload, signature = token.split(".")
        other, _ = create_access_token(uuid.uuid4())
        assert decode_access_token(f"{other.split('.')[0]}.{signature}") is None
        assert decode_access_token(f"{payload}.{signature[:-2]}") is None

    def test_garbage_rejected(self):
        assert decode_access_token("") is None
        assert decode_access_token("no-dot-here") is None
        assert decode_access_token("a.b") is None


class TestBearerParsing:
    def test_parses_bearer(self):
        assert parse_bearer_token("Bearer abc.def") == "abc.def"
        assert parse_bearer_token("bearer abc") == "abc"

    def test_rejects_other_schemes(self):
        assert parse_bearer_token(None) is None
        assert parse_bearer_token("Basic abc") is None
        assert parse_bearer_token("Bearer ") is None
