"""Initial schema — catalog, people, circulation, messaging and operations tables.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column(
            "parent_category_id", sa.Integer,
            sa.ForeignKey("categories.id", ondelete="SET NULL", name="fk_categories_parent_category_id_categories"),
            nullable=True,
        ),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )

    op.create_table(
        "books",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("isbn", sa.String(13), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(300), nullable=False),
        sa.Column("publisher", sa.String(100), nullable=True),
        sa.Column("publication_date", sa.Date, nullable=True),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column(
            "category_id", sa.Integer,
            sa.ForeignKey("categories.id", ondelete="RESTRICT", name="fk_books_category_id_categories"),
            nullable=False,
        ),
        sa.Column("total_copies", sa.Integer, nullable=False, server_default="0"),
        sa.Column("available_copies", sa.Integer, nullable=False, server_default="0"),
        sa.Column("language", sa.String(50), nullable=True),
        sa.Column("page_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="Available"),
        *_timestamps(),
        sa.UniqueConstraint("isbn", name="uq_books_isbn"),
        sa.CheckConstraint("total_copies >= 0", name="ck_books_total_copies_non_negative"),
        sa.CheckConstraint("available_copies >= 0", name="ck_books_available_copies_non_negative"),
        sa.CheckConstraint("available_copies <= total_copies", name="ck_books_available_within_total"),
    )
    op.create_index("ix_books_title", "books", ["title"])
    op.create_index("ix_books_author", "books", ["author"])

    op.create_table(
        "members",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("membership_number", sa.String(50), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(200), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("date_of_birth", sa.Date, nullable=True),
        sa.Column("membership_type", sa.String(20), nullable=False, server_default="Regular"),
        sa.Column("membership_start_date", sa.Date, nullable=False),
        sa.Column("membership_end_date", sa.Date, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Active"),
        sa.Column("max_books_allowed", sa.Integer, nullable=False, server_default="5"),
        sa.Column("current_books_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_fines_owed", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("max_fine_limit", sa.Numeric(10, 2), nullable=False, server_default="50"),
        *_timestamps(),
        sa.UniqueConstraint("membership_number", name="uq_members_membership_number"),
        sa.UniqueConstraint("email", name="uq_members_email"),
        sa.CheckConstraint("current_books_count >= 0", name="ck_members_current_books_non_negative"),
        sa.CheckConstraint("current_books_count <= max_books_allowed", name="ck_members_current_within_max"),
        sa.CheckConstraint("total_fines_owed >= 0", name="ck_members_fines_owed_non_negative"),
    )
    op.create_index("ix_members_last_name", "members", ["last_name"])

    op.create_table(
        "librarians",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_number", sa.String(50), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(200), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("role", sa.String(30), nullable=False, server_default="Librarian"),
        sa.Column("status", sa.String(20), nullable=False, server_default="Active"),
        sa.Column("hire_date", sa.Date, nullable=False),
        sa.Column("department", sa.String(100), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("employee_number", name="uq_librarians_employee_number"),
        sa.UniqueConstraint("email", name="uq_librarians_email"),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("transaction_number", sa.String(50), nullable=False),
        sa.Column(
            "book_id", sa.Integer,
            sa.ForeignKey("books.id", ondelete="RESTRICT", name="fk_transactions_book_id_books"),
            nullable=False,
        ),
        sa.Column(
            "member_id", sa.Integer,
            sa.ForeignKey("members.id", ondelete="RESTRICT", name="fk_transactions_member_id_members"),
            nullable=False,
        ),
        sa.Column("type", sa.String(20), nullable=False, server_default="Borrow"),
        sa.Column("checkout_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("return_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="Active"),
        sa.Column("renewal_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("max_renewals_allowed", sa.Integer, nullable=False, server_default="2"),
        sa.Column("fine_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column(
            "processed_by_librarian_id", sa.Integer,
            sa.ForeignKey("librarians.id", ondelete="SET NULL", name="fk_transactions_processed_by_librarian_id_librarians"),
            nullable=True,
        ),
        *_timestamps(),
        sa.UniqueConstraint("transaction_number", name="uq_transactions_transaction_number"),
    )
    op.create_index("ix_transactions_book_id", "transactions", ["book_id"])
    op.create_index("ix_transactions_member_id", "transactions", ["member_id"])
    op.create_index("ix_transactions_status", "transactions", ["status"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("reservation_number", sa.String(50), nullable=False),
        sa.Column(
            "book_id", sa.Integer,
            sa.ForeignKey("books.id", ondelete="CASCADE", name="fk_reservations_book_id_books"),
            nullable=False,
        ),
        sa.Column(
            "member_id", sa.Integer,
            sa.ForeignKey("members.id", ondelete="CASCADE", name="fk_reservations_member_id_members"),
            nullable=False,
        ),
        sa.Column("reservation_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("expiry_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notified_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="Active"),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("fulfilled_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("reservation_number", name="uq_reservations_reservation_number"),
    )
    op.create_index("ix_reservations_book_id", "reservations", ["book_id"])
    op.create_index("ix_reservations_member_id", "reservations", ["member_id"])
    op.create_index("ix_reservations_status", "reservations", ["status"])

    op.create_table(
        "fines",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("fine_number", sa.String(50), nullable=False),
        sa.Column(
            "transaction_id", sa.Integer,
            sa.ForeignKey("transactions.id", ondelete="RESTRICT", name="fk_fines_transaction_id_transactions"),
            nullable=True,
        ),
        sa.Column(
            "member_id", sa.Integer,
            sa.ForeignKey("members.id", ondelete="RESTRICT", name="fk_fines_member_id_members"),
            nullable=False,
        ),
        sa.Column("type", sa.String(20), nullable=False, server_default="OverdueBook"),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("issue_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("paid_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("reference_number", sa.String(100), nullable=True),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("fine_number", name="uq_fines_fine_number"),
        sa.CheckConstraint("amount >= 0", name="ck_fines_amount_non_negative"),
    )
    op.create_index("ix_fines_member_id", "fines", ["member_id"])
    op.create_index("ix_fines_status", "fines", ["status"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "book_id", sa.Integer,
            sa.ForeignKey("books.id", ondelete="CASCADE", name="fk_reviews_book_id_books"),
            nullable=False,
        ),
        sa.Column(
            "member_id", sa.Integer,
            sa.ForeignKey("members.id", ondelete="CASCADE", name="fk_reviews_member_id_members"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.String(1000), nullable=True),
        sa.Column("review_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("is_approved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("book_id", "member_id", name="uq_reviews_book_member"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_book_id", "reviews", ["book_id"])
    op.create_index("ix_reviews_member_id", "reviews", ["member_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "member_id", sa.Integer,
            sa.ForeignKey("members.id", ondelete="CASCADE", name="fk_notifications_member_id_members"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.String(1000), nullable=False),
        sa.Column("type", sa.String(30), nullable=False, server_default="General"),
        sa.Column("status", sa.String(20), nullable=False, server_default="Unread"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("related_entity_id", sa.Integer, nullable=True),
        sa.Column("related_entity_type", sa.String(50), nullable=True),
        sa.Column("is_email_sent", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_notifications_member_id", "notifications", ["member_id"])
    op.create_index("ix_notifications_status", "notifications", ["status"])

    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("alert_type", sa.String(50), nullable=False),
        sa.Column("severity", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("acknowledged_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "acknowledged_by_librarian_id", sa.Integer,
            sa.ForeignKey("librarians.id", ondelete="SET NULL", name="fk_alerts_acknowledged_by_librarian_id_librarians"),
            nullable=True,
        ),
        sa.Column("additional_data", sa.Text, nullable=True),
        sa.Column("source", sa.String(100), nullable=True),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("entity_type", sa.String(100), nullable=False),
        sa.Column("entity_id", sa.Integer, nullable=True),
        sa.Column("old_values", sa.JSON, nullable=True),
        sa.Column("new_values", sa.JSON, nullable=True),
        sa.Column("user_id", sa.Integer, nullable=True),
        sa.Column("user_type", sa.String(50), nullable=False, server_default="System"),
        sa.Column("user_email", sa.String(200), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.String(500), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_entity_type", "audit_logs", ["entity_type"])
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"])
    op.create_index("ix_audit_logs_timestamp", "audit_logs", ["timestamp"])

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("report_type", sa.String(100), nullable=False),
        sa.Column("format", sa.String(20), nullable=False, server_default="json"),
        sa.Column("status", sa.String(50), nullable=False, server_default="Pending"),
        sa.Column("parameters", sa.JSON, nullable=True),
        sa.Column("data", sa.JSON, nullable=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "import_jobs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer, nullable=False, server_default="0"),
        sa.Column("import_type", sa.String(100), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="Pending"),
        sa.Column("total_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column("processed_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column("success_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column("failed_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column("errors", sa.JSON, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "export_jobs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("export_type", sa.String(100), nullable=False),
        sa.Column("format", sa.String(20), nullable=False),
        sa.Column("filters", sa.JSON, nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="Pending"),
        sa.Column("total_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column("processed_records", sa.Integer, nullable=False, server_default="0"),
        sa.Column("file_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("file_size", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("export_jobs")
    op.drop_table("import_jobs")
    op.drop_table("reports")
    op.drop_table("audit_logs")
    op.drop_table("alerts")
    op.drop_table("notifications")
    op.drop_table("reviews")
    op.drop_table("fines")
    op.drop_table("reservations")
    op.drop_table("transactions")
    op.drop_table("librarians")
    op.drop_table("members")
    op.drop_table("books")
    op.drop_table("categories")
