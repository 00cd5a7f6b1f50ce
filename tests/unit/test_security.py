"""Password hashing, token issuing and engine options."""

from datetime import timedelta

from workforce.core.database import engine_options
from workforce.core.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    create_access_token,
    decode_token,
    get_password_hash,
    issue_token_pair,
    verify_password,
)


class TestPasswords:
    def test_hash_verifies(self):
        hashed = get_password_hash("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_non_bcrypt_value_never_matches(self):
        assert not verify_password("secret123", "plain-text")


class TestTokens:
    def test_pair_carries_role_claims(self):
        pair = issue_token_pair(7, "leader", "team_leader")
        access = decode_token(pair["access_token"])
        assert access["sub"] == "7"
        assert access["role"] == "team_leader"
        assert pair["token_type"] == "bearer"
        assert pair["expires_in"] > 0

    def test_token_type_must_match(self):
        pair = issue_token_pair(7, "leader", "team_leader")
        assert decode_token(pair["refresh_token"], expected_type=REFRESH_TOKEN)["sub"] == "7"
        assert decode_token(pair["refresh_token"], expected_type=ACCESS_TOKEN) is None
        assert decode_token(pair["access_token"], expected_type=REFRESH_TOKEN) is None

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-5))
        assert decode_token(token) is None

    def test_garbage_rejected(self):
        assert decode_token("not-a-jwt") is None


def test_engine_options_per_backend():
    assert engine_options("sqlite:///./workforce.db") == {"connect_args": {"check_same_thread": False}}
    assert engine_options("postgresql://wm@localhost/wm") == {"pool_pre_ping": True}
