import uuid
from datetime import datetime
from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from designhub.db.base import Base, TimestampMixin, SoftDeleteMixin, TenantScopedMixin, ProjectScopedMixin


class Drawing(Base, TimestampMixin, SoftDeleteMixin, TenantScopedMixin, ProjectScopedMixin):
    """
    Project drawing register entry.
    status: active | archived
    current_revision always equals the highest DrawingRevision.revision_number
    and is only moved by add_revision, under a row lock.
    """
    __tablename__ = "drawings"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    drawing_no: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    discipline: Mapped[str] = mapped_column(String(100), nullable=False)
    drawing_type: Mapped[str] = mapped_column(String(100), nullable=False, default="OTHER")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    current_revision: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    revisions: Mapped[list["DrawingRevision"]] = relationship(back_populates="drawing", lazy="noload")
    __table_args__ = (
        UniqueConstraint("tenant_id", "project_id", "drawing_no", name="uq_drawing_project_no"),
        CheckConstraint("current_revision >= 1", name="ck_drawings_current_revision_positive"),
    )


class DrawingRevision(Base, TimestampMixin, TenantScopedMixin):
    """Immutable. revision_number runs 1, 2, 3, ... per drawing."""
    __tablename__ = "drawing_revisions"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    drawing_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("drawings.id", ondelete="CASCADE"), nullable=False, index=True)
    revision_number: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("files.id", ondelete="RESTRICT"), nullable=True)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    issued_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    drawing: Mapped["Drawing"] = relationship(back_populates="revisions")
    __table_args__ = (
        UniqueConstraint("drawing_id", "revision_number", name="uq_drawing_revision_number"),
        CheckConstraint("revision_number >= 1", name="ck_drawing_revisions_number_positive"),
    )
