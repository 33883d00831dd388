"""Subject aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import SubjectId


@dataclass(frozen=True)
class Subject:
    """Subject aggregate representing an account that can authenticate.

    A subject carries at most one live session identifier. Every credential
    embeds the session id that was current when it was issued, and a
    credential stays usable only while that id is still the stored one.

    ``current_session_id`` is None for accounts created before session
    binding existed. Such accounts accept any otherwise valid credential
    until their first issuance writes a session id.
    """

    id: SubjectId
    identity: str
    current_session_id: str | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"Subject({self.identity})"

    def __eq__(self, other: object) -> bool:
        """Subjects are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, Subject):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)

    @property
    def is_session_bound(self) -> bool:
        """Whether the account has been issued a session id at least once."""
        return self.current_session_id is not None

    def accepts_session(self, session_id: str | None) -> bool:
        """Check a credential's embedded session id against the stored one.

        An unbound account accepts anything. Once bound, only an exact
        match is accepted, so a credential without a session id fails.
        """
        if self.current_session_id is None:
            return True
        return session_id == self.current_session_id
