"""Unit tests for core/security.py -- PasswordHasher and TokenService."""

import string
from datetime import timedelta

import pytest

from accounts.core.config import Settings
from accounts.core.security import PasswordHasher, TokenError, TokenService
from tests.conftest import FakeClock

BASE64URL_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


def _flip_char(segment: str, index: int) -> str:
    replacement = "A" if segment[index] != "A" else "B"
    return segment[:index] + replacement + segment[index + 1:]


# ---------------------------------------------------------------------------
# PasswordHasher
# ---------------------------------------------------------------------------


class TestPasswordHasher:

    @pytest.fixture
    def hasher(self) -> PasswordHasher:
        return PasswordHasher(rounds=4)

    @pytest.mark.parametrize("password", ["pw123", "correct horse battery staple", "pässwörd", "x"])
    def test_verify_original_plaintext(self, hasher, password) -> None:
        assert hasher.verify(password, hasher.hash(password)) is True

    @pytest.mark.parametrize("other", ["pw124", "PW123", "pw123 ", ""])
    def test_verify_other_plaintext_is_false(self, hasher, other) -> None:
        assert hasher.verify(other, hasher.hash("pw123")) is False

    def test_same_plaintext_gets_fresh_salt(self, hasher) -> None:
        first = hasher.hash("pw123")
        second = hasher.hash("pw123")
        assert first != second
        assert hasher.verify("pw123", first)
        assert hasher.verify("pw123", second)

    def test_record_encodes_algorithm_and_cost(self, hasher) -> None:
        assert hasher.hash("pw123").startswith("$2b$04$")

    def test_default_cost_is_ten(self) -> None:
        assert PasswordHasher().hash("pw123").startswith("$2b$10$")

    def test_verify_uses_cost_embedded_in_record(self, hasher) -> None:
        stored = PasswordHasher(rounds=5).hash("pw123")
        assert hasher.verify("pw123", stored) is True

    def test_malformed_record_raises(self, hasher) -> None:
        with pytest.raises(ValueError):
            hasher.verify("pw123", "not-a-bcrypt-hash")

    @pytest.mark.parametrize("password", ["pw\x00x", "\x00", "a" * 73, "\u00e4" * 37])
    def test_password_bcrypt_cannot_store_is_rejected(self, hasher, password) -> None:
        with pytest.raises(ValueError):
            hasher.hash(password)

    def test_72_byte_password_round_trips(self, hasher) -> None:
        password = "a" * 71 + "b"
        assert hasher.verify(password, hasher.hash(password)) is True

    def test_nul_password_does_not_match(self, hasher) -> None:
        stored = hasher.hash("pw")
        assert hasher.verify("pw\x00x", stored) is False
        assert hasher.verify("pw\x00", stored) is False

    def test_longer_password_sharing_prefix_does_not_match(self, hasher) -> None:
        password = "a" * 72
        stored = hasher.hash(password)
        assert hasher.verify(password + "b", stored) is False
        assert hasher.verify(password + "a", stored) is False


# ---------------------------------------------------------------------------
# TokenService
# ---------------------------------------------------------------------------


class TestTokenService:

    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock()

    @pytest.fixture
    def tokens(self, clock) -> TokenService:
        return TokenService("unit-test-secret", clock=clock)

    def test_verify_right_after_issue(self, tokens) -> None:
        result = tokens.verify(tokens.issue("user-1"))
        assert result.ok
        assert result.subject_id == "user-1"
        assert result.error is None

    def test_valid_just_before_expiry(self, tokens, clock) -> None:
        token = tokens.issue("user-1")
        clock.advance(days=7, seconds=-1)
        assert tokens.verify(token).ok

    def test_expired_at_seven_days(self, tokens, clock) -> None:
        token = tokens.issue("user-1")
        clock.advance(days=7)
        result = tokens.verify(token)
        assert not result.ok
        assert result.error is TokenError.EXPIRED
        assert result.subject_id is None

    def test_tampered_payload_is_invalid(self, tokens) -> None:
        header, payload, signature = tokens.issue("user-1").split(".")
        tampered = ".".join([header, _flip_char(payload, len(payload) // 2), signature])
        assert tokens.verify(tampered).error is TokenError.INVALID

    def test_tampered_signature_is_invalid(self, tokens) -> None:
        header, payload, signature = tokens.issue("user-1").split(".")
        tampered = ".".join([header, payload, _flip_char(signature, len(signature) // 2)])
        assert tokens.verify(tampered).error is TokenError.INVALID

    def test_tampered_header_is_invalid(self, tokens) -> None:
        header, payload, signature = tokens.issue("user-1").split(".")
        tampered = ".".join([_flip_char(header, len(header) // 2), payload, signature])
        assert tokens.verify(tampered).error is TokenError.INVALID

    def test_other_secret_is_invalid(self, tokens, clock) -> None:
        forged = TokenService("another-secret", clock=clock).issue("user-1")
        assert tokens.verify(forged).error is TokenError.INVALID

    def test_signature_checked_before_expiry(self, tokens, clock) -> None:
        forged = TokenService("another-secret", clock=clock).issue("user-1")
        clock.advance(days=30)
        assert tokens.verify(forged).error is TokenError.INVALID

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c", "Bearer"])
    def test_garbage_is_invalid(self, tokens, garbage) -> None:
        assert tokens.verify(garbage).error is TokenError.INVALID

    def test_only_canonical_signature_spelling_verifies(self, tokens) -> None:
        token = tokens.issue("user-1")
        head, signature = token.rsplit(".", 1)

        accepted = [
            char
            for char in BASE64URL_ALPHABET
            if tokens.verify(f"{head}.{signature[:-1]}{char}").ok
        ]

        assert accepted == [signature[-1]]

    def test_padded_segment_is_invalid(self, tokens) -> None:
        token = tokens.issue("user-1")
        assert tokens.verify(token + "=").error is TokenError.INVALID

    def test_wrong_segment_count_is_invalid(self, tokens) -> None:
        token = tokens.issue("user-1")
        header, payload, _ = token.split(".")
        assert tokens.verify(f"{header}.{payload}").error is TokenError.INVALID
        assert tokens.verify(token + ".extra").error is TokenError.INVALID

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenService("")

    def test_from_settings_uses_seven_day_window(self) -> None:
        settings = Settings(_env_file=None, SECRET_KEY="s3cret")
        tokens = TokenService.from_settings(settings)
        assert tokens.expires_delta == timedelta(days=7)
        assert tokens.algorithm == "HS256"
