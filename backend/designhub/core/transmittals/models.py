import uuid
from datetime import datetime
from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from designhub.db.base import Base, TimestampMixin, SoftDeleteMixin, TenantScopedMixin, ProjectScopedMixin


class Transmittal(Base, TimestampMixin, SoftDeleteMixin, TenantScopedMixin, ProjectScopedMixin):
    """
    One send event of drawings to one recipient.
    status: draft | sent (sent is terminal, re-sending means a new transmittal)
    recipient_type: client | contractor | subcontractor | team | other
    method: email | hand_delivery | courier | ftp | other
    """
    __tablename__ = "transmittals"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transmittal_no: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(500), nullable=True)
    recipient_name: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient_email: Mapped[str] = mapped_column(String(255), nullable=False)
    recipient_company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recipient_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    method: Mapped[str] = mapped_column(String(50), nullable=False, default="email")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="draft")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    delivery_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    items: Mapped[list["TransmittalItem"]] = relationship(
        back_populates="transmittal", lazy="selectin", order_by="TransmittalItem.created_at",
    )
    __table_args__ = (
        UniqueConstraint("project_id", "transmittal_no", name="uq_transmittal_project_no"),
        CheckConstraint("(status = 'sent') = (sent_at IS NOT NULL)", name="ck_transmittals_sent_at_iff_sent"),
    )


class TransmittalItem(Base, TimestampMixin, TenantScopedMixin):
    """
    revision_id null means "whatever is current when sent".
    revision_number is provisional while the transmittal is a draft and frozen by mark_sent.
    purpose: for_approval | for_construction | for_information | for_review | as_requested
    """
    __tablename__ = "transmittal_items"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transmittal_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("transmittals.id", ondelete="CASCADE"), nullable=False, index=True)
    drawing_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("drawings.id", ondelete="RESTRICT"), nullable=False, index=True)
    revision_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("drawing_revisions.id", ondelete="RESTRICT"), nullable=True)
    revision_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    purpose: Mapped[str] = mapped_column(String(50), nullable=False, default="for_information")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    transmittal: Mapped["Transmittal"] = relationship(back_populates="items")
