"""SQLAlchemy ORM model for the workspaces table."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class WorkspaceModel(Base, TimestampMixin):
    """ORM model for workspaces table.

    Foreign Key Constraints:
    - owner_id references subjects.id with RESTRICT delete
    - parent_workspace_id references workspaces.id with RESTRICT delete
      Cannot delete a parent workspace while children exist
    """

    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("subjects.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    parent_workspace_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<WorkspaceModel(id={self.id}, owner_id={self.owner_id})>"
