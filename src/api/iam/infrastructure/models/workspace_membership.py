"""SQLAlchemy ORM model for the workspace_memberships table."""

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class WorkspaceMembershipModel(Base, TimestampMixin):
    """ORM model for workspace_memberships table.

    Removal flips ``is_active``; rows are never deleted, so the unique
    constraint holds across deactivation and reactivation.
    """

    __tablename__ = "workspace_memberships"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    subject_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
    )
    workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    invited_by: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("subjects.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint(
            "subject_id",
            "workspace_id",
            name="uq_workspace_memberships_subject_workspace",
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<WorkspaceMembershipModel(subject_id={self.subject_id}, "
            f"workspace_id={self.workspace_id}, role={self.role}, "
            f"is_active={self.is_active})>"
        )
