"""Drawing register with integer revisions, transmittal log

Revision ID: 0002_drawings_transmittals
Revises: 0001_initial
Create Date: 2026-09-01 00:00:01
"""
from typing import Sequence, Union
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "0002_drawings_transmittals"
down_revision: Union[str, None] = "0001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "drawings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drawing_no", sa.String(100), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("discipline", sa.String(100), nullable=False),
        sa.Column("drawing_type", sa.String(100), nullable=False, server_default="OTHER"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="active"),
        sa.Column("current_revision", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_drawings"),
        sa.UniqueConstraint("tenant_id", "project_id", "drawing_no", name="uq_drawing_project_no"),
        sa.CheckConstraint("current_revision >= 1", name="ck_drawings_current_revision_positive"),
    )
    op.create_index("ix_drawings_tenant_id", "drawings", ["tenant_id"])
    op.create_index("ix_drawings_project_id", "drawings", ["project_id"])

    op.create_table(
        "drawing_revisions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drawing_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("revision_number", sa.Integer, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("file_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("issued_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["drawing_id"], ["drawings.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["file_id"], ["files.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id", name="pk_drawing_revisions"),
        sa.UniqueConstraint("drawing_id", "revision_number", name="uq_drawing_revision_number"),
        sa.CheckConstraint("revision_number >= 1", name="ck_drawing_revisions_number_positive"),
    )
    op.create_index("ix_drawing_revisions_tenant_id", "drawing_revisions", ["tenant_id"])
    op.create_index("ix_drawing_revisions_drawing_id", "drawing_revisions", ["drawing_id"])

    op.create_table(
        "transmittals",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("transmittal_no", sa.String(20), nullable=False),
        sa.Column("subject", sa.String(500), nullable=True),
        sa.Column("recipient_name", sa.String(255), nullable=False),
        sa.Column("recipient_email", sa.String(255), nullable=False),
        sa.Column("recipient_company", sa.String(255), nullable=True),
        sa.Column("recipient_type", sa.String(50), nullable=True),
        sa.Column("method", sa.String(50), nullable=False, server_default="email"),
        sa.Column("status", sa.String(50), nullable=False, server_default="draft"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sent_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("delivery_reference", sa.String(255), nullable=True),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_transmittals"),
        sa.UniqueConstraint("project_id", "transmittal_no", name="uq_transmittal_project_no"),
        sa.CheckConstraint(
            "(status = 'sent') = (sent_at IS NOT NULL)", name="ck_transmittals_sent_at_iff_sent",
        ),
    )
    op.create_index("ix_transmittals_tenant_id", "transmittals", ["tenant_id"])
    op.create_index("ix_transmittals_project_id", "transmittals", ["project_id"])
    op.create_index("ix_transmittals_project_status", "transmittals", ["project_id", "status"])

    op.create_table(
        "transmittal_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("transmittal_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("drawing_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("revision_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("revision_number", sa.Integer, nullable=True),
        sa.Column("purpose", sa.String(50), nullable=False, server_default="for_information"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["transmittal_id"], ["transmittals.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["drawing_id"], ["drawings.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["revision_id"], ["drawing_revisions.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id", name="pk_transmittal_items"),
    )
    op.create_index("ix_transmittal_items_tenant_id", "transmittal_items", ["tenant_id"])
    op.create_index("ix_transmittal_items_transmittal_id", "transmittal_items", ["transmittal_id"])
    op.create_index("ix_transmittal_items_drawing_id", "transmittal_items", ["drawing_id"])


def downgrade() -> None:
    op.drop_table("transmittal_items")
    op.drop_table("transmittals")
    op.drop_table("drawing_revisions")
    op.drop_table("drawings")
