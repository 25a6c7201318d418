"""files and upload rate limits

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "files",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("original_filename", sa.String(255), nullable=False),
        sa.Column("object_key", sa.String(512), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("content_type", sa.String(255), nullable=False),
        sa.Column("download_count", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("uploader_ip", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_files_expires_at", "files", ["expires_at"])

    op.create_table(
        "upload_rate_limits",
        sa.Column("origin_id", sa.String(64), primary_key=True),
        sa.Column("upload_count", sa.Integer(), nullable=False),
        sa.Column("last_upload_date", sa.Date(), nullable=False),
    )


def downgrade():
    op.drop_table("upload_rate_limits")
    op.drop_index("ix_files_expires_at", table_name="files")
    op.drop_table("files")
