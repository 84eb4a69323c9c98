import hashlib
import json
import logging

import jwt

from wecare.config import settings
from wecare.infrastructure.audit.std_logger import StdAuditLogger
from wecare.infrastructure.security.passlib_hasher import PasslibPasswordHasher
from wecare.utils import create_jwt_token, decode_jwt_token


def test_jwt_round_trip_carries_role():
    token = create_jwt_token({"sub": "acc-1", "role": "nurse"})
    payload = decode_jwt_token(token)
    assert payload["sub"] == "acc-1"
    assert payload["role"] == "nurse"
    assert payload["type"] == "access"


def test_jwt_rejects_tampered_and_foreign_tokens():
    token = create_jwt_token({"sub": "acc-1", "role": "patient"})
    assert decode_jwt_token(token + "x") is None
    foreign = jwt.encode({"sub": "acc-1", "role": "admin", "type": "access"}, "another-key", algorithm=settings.ALGORITHM)
    assert decode_jwt_token(foreign) is None


def test_jwt_rejects_expired_token():
    token = create_jwt_token({"sub": "acc-1", "role": "patient"}, expires_minutes=-1)
    assert decode_jwt_token(token) is None


def test_passlib_hasher():
    hasher = PasslibPasswordHasher(rounds=4)
    hashed = hasher.hash("password123")
    assert hashed != "password123"
    assert hasher.verify("password123", hashed)
    assert not hasher.verify("wrong", hashed)
    assert not hasher.verify("password123", "not-a-bcrypt-hash")


def test_audit_logger_hashes_email(caplog):
    with caplog.at_level(logging.INFO, logger="wecare.infrastructure.audit.std_logger"):
        StdAuditLogger().log("login", actor_id="acc-1", email="alice@example.com", success=False)
    line = next(r.getMessage() for r in caplog.records if r.getMessage().startswith("AUDIT: "))
    entry = json.loads(line[len("AUDIT: "):])
    assert entry["action"] == "login"
    assert entry["success"] is False
    assert entry["email_hash"] == hashlib.sha256(b"alice@example.com").hexdigest()
    assert "alice@example.com" not in line
