"""Create marketplace tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates users, portfolio_images, service_requests and ratings.
How:   Portable column types (sa.Uuid, timezone-aware DateTime) so the same
       migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("user_type", sa.String(20), nullable=False, comment="client | professional"),
        sa.Column("category", sa.String(80), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("experience", sa.Text(), nullable=True),
        sa.Column("street", sa.String(200), nullable=True),
        sa.Column("number", sa.String(20), nullable=True),
        sa.Column("complement", sa.String(120), nullable=True),
        sa.Column("neighborhood", sa.String(120), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("state", sa.String(2), nullable=True),
        sa.Column("zip_code", sa.String(9), nullable=True),
        sa.Column("profile_image_path", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_type_category", "users", ["user_type", "category"])
    op.create_index("idx_users_state_city", "users", ["state", "city"])

    op.create_table(
        "portfolio_images",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("professional_id", sa.Uuid(), nullable=False),
        sa.Column(
            "image_path",
            sa.String(255),
            nullable=False,
            comment="Relative path from storage root to the uploaded image",
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["professional_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_portfolio_professional_position",
        "portfolio_images",
        ["professional_id", "position"],
    )

    op.create_table(
        "service_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("client_name", sa.String(120), nullable=False),
        sa.Column("professional_id", sa.Uuid(), nullable=False),
        sa.Column("professional_name", sa.String(120), nullable=False),
        sa.Column("service_description", sa.Text(), nullable=False),
        sa.Column("service_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("urgency", sa.String(20), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            comment="pending, accepted, completed, cancelled",
        ),
        sa.Column("request_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["client_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["professional_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_requests_client_date", "service_requests", ["client_id", "request_date"])
    op.create_index(
        "idx_requests_professional_date",
        "service_requests",
        ["professional_id", "request_date"],
    )

    op.create_table(
        "ratings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("professional_id", sa.Uuid(), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=False),
        sa.Column("client_name", sa.String(120), nullable=False),
        sa.Column("service_request_id", sa.Uuid(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_ratings_range"),
        sa.ForeignKeyConstraint(["professional_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["client_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_request_id"], ["service_requests.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("service_request_id"),
    )
    op.create_index(
        "idx_ratings_professional_created",
        "ratings",
        ["professional_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_ratings_professional_created", table_name="ratings")
    op.drop_table("ratings")
    op.drop_index("idx_requests_professional_date", table_name="service_requests")
    op.drop_index("idx_requests_client_date", table_name="service_requests")
    op.drop_table("service_requests")
    op.drop_index("idx_portfolio_professional_position", table_name="portfolio_images")
    op.drop_table("portfolio_images")
    op.drop_index("idx_users_state_city", table_name="users")
    op.drop_index("idx_users_type_category", table_name="users")
    op.drop_table("users")
