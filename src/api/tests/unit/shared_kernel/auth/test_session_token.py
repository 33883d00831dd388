"""Unit tests for SessionTokenCodec."""

from datetime import UTC, datetime, timedelta
from unittest.mock import create_autospec

import pytest
from jose import jwt

from shared_kernel.auth import (
    InvalidTokenError,
    SessionTokenCodec,
    SessionTokenProbe,
)

SECRET = "unit-test-secret-key-that-is-long-enough"


@pytest.fixture
def mock_probe():
    return create_autospec(SessionTokenProbe, instance=True)


@pytest.fixture
def codec(mock_probe) -> SessionTokenCodec:
    return SessionTokenCodec(secret_key=SECRET, probe=mock_probe, ttl=timedelta(hours=1))


class TestConstruction:
    """Tests for codec construction."""

    def test_empty_secret_is_rejected(self, mock_probe):
        """A codec without a secret cannot sign anything."""
        with pytest.raises(ValueError, match="secret_key"):
            SessionTokenCodec(secret_key="", probe=mock_probe)

    def test_non_positive_ttl_is_rejected(self, mock_probe):
        """Tokens must have a lifetime."""
        with pytest.raises(ValueError, match="ttl"):
            SessionTokenCodec(secret_key=SECRET, probe=mock_probe, ttl=timedelta(0))


class TestEncodeDecode:
    """Tests for signing and verification."""

    def test_claims_survive_round_trip(self, codec):
        """Identity and session id come back unchanged."""
        now = datetime.now(UTC).replace(microsecond=0)

        claims = codec.decode(
            codec.encode(subject_identity="alice@example.com", session_id="s-1", now=now)
        )

        assert claims.subject_identity == "alice@example.com"
        assert claims.session_id == "s-1"
        assert claims.issued_at == now
        assert claims.expires_at == now + timedelta(hours=1)

    def test_token_without_session_claim_decodes_to_none(self, codec):
        """Legacy tokens carry no session id."""
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "alice@example.com",
                "iss": "folio",
                "iat": int(now.timestamp()),
                "exp": int((now + timedelta(minutes=5)).timestamp()),
            },
            SECRET,
            algorithm="HS256",
        )

        assert codec.decode(token).session_id is None

    def test_expired_token_is_rejected(self, codec, mock_probe):
        """Expiry is enforced."""
        token = codec.encode(
            subject_identity="alice@example.com",
            session_id="s-1",
            now=datetime.now(UTC) - timedelta(hours=3),
        )

        with pytest.raises(InvalidTokenError, match="expired"):
            codec.decode(token)

        mock_probe.token_decode_failed.assert_called_once_with(reason="Token expired")

    def test_wrong_secret_is_rejected(self, codec, mock_probe):
        """A token signed with a different key fails verification."""
        forged = SessionTokenCodec(
            secret_key="another-secret-key-of-reasonable-length", probe=mock_probe
        ).encode(subject_identity="alice@example.com", session_id="s-1")

        with pytest.raises(InvalidTokenError):
            codec.decode(forged)

    def test_foreign_issuer_is_rejected(self, mock_probe):
        """Tokens from another issuer are not accepted."""
        other = SessionTokenCodec(secret_key=SECRET, probe=mock_probe, issuer="other")
        mine = SessionTokenCodec(secret_key=SECRET, probe=mock_probe)

        with pytest.raises(InvalidTokenError):
            mine.decode(other.encode(subject_identity="a", session_id="s"))

    def test_empty_token_is_rejected(self, codec):
        """A missing token never decodes."""
        with pytest.raises(InvalidTokenError, match="Missing"):
            codec.decode("")

    def test_encode_records_probe_event(self, codec, mock_probe):
        """Signing is observed."""
        codec.encode(subject_identity="alice@example.com", session_id="s-1")

        mock_probe.token_encoded.assert_called_once()
