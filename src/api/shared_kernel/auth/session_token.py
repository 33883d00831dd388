"""Session-bound bearer token codec.

Encodes and decodes HMAC-signed JWTs that embed the subject identity and
the session identifier that was current when the token was issued. The
codec only proves that a token is authentic and unexpired; comparing the
embedded session identifier with the stored one is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SessionTokenProbe

SESSION_ID_CLAIM = "sid"


@dataclass(frozen=True)
class SessionTokenClaims:
    """Verified claims of a session token.

    ``session_id`` is None for tokens minted before session binding existed.
    """

    subject_identity: str
    session_id: str | None
    issued_at: datetime
    expires_at: datetime


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with, or expired."""

    pass


class SessionTokenCodec:
    """Signs and verifies session tokens with a shared secret.

    Tokens carry ``sub`` (subject identity), ``sid`` (session id), ``iss``,
    ``iat`` and ``exp``. Verification checks signature, issuer and expiry.
    """

    def __init__(
        self,
        secret_key: str,
        probe: SessionTokenProbe,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        issuer: str = "folio",
    ):
        """Initialize the codec.

        Args:
            secret_key: HMAC secret shared by issuer and verifier.
            probe: Observability probe for logging events.
            algorithm: HMAC algorithm (HS256, HS384 or HS512).
            ttl: Lifetime of issued tokens.
            issuer: Value of the ``iss`` claim written and expected.
        """
        if not secret_key:
            raise ValueError("secret_key cannot be empty")
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")

        self._secret_key = secret_key
        self._probe = probe
        self._algorithm = algorithm
        self._ttl = ttl
        self._issuer = issuer

    @property
    def ttl(self) -> timedelta:
        """Lifetime of tokens produced by this codec."""
        return self._ttl

    def encode(
        self,
        subject_identity: str,
        session_id: str,
        now: datetime | None = None,
    ) -> str:
        """Sign a token for a subject's session.

        Args:
            subject_identity: Stable identity of the subject (username/email).
            session_id: Session identifier to embed.
            now: Issue time; defaults to the current UTC time.

        Returns:
            The compact JWT string.
        """
        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + self._ttl
        claims = {
            "sub": subject_identity,
            SESSION_ID_CLAIM: session_id,
            "iss": self._issuer,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

        self._probe.token_encoded(
            subject_identity=subject_identity,
            expires_at=expires_at.isoformat(),
        )
        return token

    def decode(self, token: str) -> SessionTokenClaims:
        """Verify a token and return its claims.

        Args:
            token: The JWT string.

        Returns:
            SessionTokenClaims containing the verified claims.

        Raises:
            InvalidTokenError: If the token is malformed, tampered with,
                issued by someone else, or expired.
        """
        if not token:
            self._probe.token_decode_failed(reason="Missing token")
            raise InvalidTokenError("Missing token")

        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": False,
                    "verify_iss": True,
                    "verify_exp": True,
                    "verify_iat": True,
                    "require_exp": True,
                    "require_sub": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_decode_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_decode_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            error_msg = str(e).lower()
            if "signature" in error_msg:
                self._probe.token_decode_failed(reason="Invalid signature")
                raise InvalidTokenError("Invalid token signature") from e
            self._probe.token_decode_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        session_id = claims.get(SESSION_ID_CLAIM)
        return SessionTokenClaims(
            subject_identity=str(claims["sub"]),
            session_id=str(session_id) if session_id is not None else None,
            issued_at=datetime.fromtimestamp(int(claims.get("iat", 0)), tz=UTC),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=UTC),
        )
