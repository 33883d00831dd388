"""SQLAlchemy ORM model for the subjects table.

Stores accounts together with their single live session id.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class SubjectModel(Base, TimestampMixin):
    """ORM model for subjects table.

    ``current_session_id`` is NULL only for accounts created before session
    binding existed; the first credential issuance fills it and it is never
    cleared afterwards.
    """

    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    identity: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    current_session_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<SubjectModel(id={self.id}, identity={self.identity})>"
