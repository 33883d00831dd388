"""SQLAlchemy ORM model for the resources table.

Holds only the attributes access decisions depend on. Parent links are
plain id columns; the application walks them iteratively.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class ResourceModel(Base, TimestampMixin):
    """ORM model for resources table.

    Foreign Key Constraints:
    - owner_id references subjects.id with RESTRICT delete
    - parent_id references resources.id with RESTRICT delete
    - workspace_id references workspaces.id with SET NULL delete
    """

    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("subjects.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("resources.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    workspace_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("workspaces.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ResourceModel(id={self.id}, owner_id={self.owner_id}, "
            f"parent_id={self.parent_id})>"
        )
