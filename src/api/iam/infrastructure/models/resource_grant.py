"""SQLAlchemy ORM model for the resource_grants table."""

from sqlalchemy import ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

LIVE_GRANT_INDEX = "uq_resource_grants_live_subject_resource"


class ResourceGrantModel(Base, TimestampMixin):
    """ORM model for resource_grants table (per-resource ACL entries).

    Several rows may exist for one (subject, resource) pair, but at most one
    of them is PENDING or ACCEPTED; REJECTED rows are kept as history. The
    partial unique index LIVE_GRANT_INDEX enforces this in the database.

    Foreign Key Constraints:
    - resource_id references resources.id with CASCADE delete
    - subject_id and invited_by reference subjects.id with CASCADE delete
    """

    __tablename__ = "resource_grants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    subject_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
    )
    resource_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    invited_by: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index(
            "idx_resource_grants_subject_resource_status",
            "subject_id",
            "resource_id",
            "status",
        ),
        Index(
            LIVE_GRANT_INDEX,
            "subject_id",
            "resource_id",
            unique=True,
            postgresql_where=text("status IN ('pending', 'accepted')"),
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ResourceGrantModel(id={self.id}, subject_id={self.subject_id}, "
            f"resource_id={self.resource_id}, level={self.level}, "
            f"status={self.status})>"
        )
