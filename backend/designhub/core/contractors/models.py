import uuid
from sqlalchemy import Boolean, String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from designhub.db.base import Base, TimestampMixin, SoftDeleteMixin, TenantScopedMixin, ProjectScopedMixin


class Contractor(Base, TimestampMixin, SoftDeleteMixin, TenantScopedMixin):
    """
    Studio-wide contact book of trades.
    contractor_type: contractor | subcontractor
    """
    __tablename__ = "contractors"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    trade: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contractor_type: Mapped[str] = mapped_column(String(50), nullable=False, default="contractor")


class ProjectContractor(Base, TimestampMixin, TenantScopedMixin, ProjectScopedMixin):
    """Contractor assigned to a project. Unlinking flips is_active, history stays."""
    __tablename__ = "project_contractors"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    contractor_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("contractors.id", ondelete="CASCADE"), nullable=False, index=True)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    contractor: Mapped["Contractor"] = relationship(lazy="joined")
    __table_args__ = (UniqueConstraint("project_id", "contractor_id", name="uq_project_contractor"),)
