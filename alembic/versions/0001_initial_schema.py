"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000

Creates every table of the platform: accounts and documents, subscriptions
and payments, the university catalogue, applications, scholarships, courses,
consultations, support tickets, chat and the blog.

Enum types store member NAMES (uppercase), matching how SQLAlchemy's Enum
persists Python enums.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


ENUMS = {
    "user_role": ("STUDENT", "ADMIN"),
    "subscription_plan": ("FREE", "ASIA", "EUROPE", "GLOBAL"),
    "subscription_status": ("PENDING", "ACTIVE", "EXPIRED", "CANCELLED"),
    "payment_method": ("MYXN_TOKEN", "CREDIT_CARD"),
    "payment_status": ("PENDING", "COMPLETED", "FAILED", "REFUNDED"),
    "application_status": (
        "DRAFT",
        "SUBMITTED",
        "UNDER_REVIEW",
        "ACCEPTED",
        "REJECTED",
        "WITHDRAWN",
    ),
    "course_type": ("FREE", "PAID"),
    "enrollment_status": ("ACTIVE", "COMPLETED", "CANCELLED"),
    "consultation_type": ("GENERAL", "VISA", "SCHOLARSHIP", "APPLICATION", "INTERVIEW"),
    "consultation_status": ("SCHEDULED", "CONFIRMED", "RESCHEDULED", "COMPLETED", "CANCELLED"),
    "ticket_category": ("GENERAL", "APPLICATION", "PAYMENT", "TECHNICAL", "SUBSCRIPTION", "OTHER"),
    "ticket_priority": ("LOW", "MEDIUM", "HIGH", "URGENT"),
    "ticket_status": ("OPEN", "ANSWERED", "WAITING", "CLOSED"),
    "chat_message_role": ("USER", "ASSISTANT"),
    "post_status": ("DRAFT", "SCHEDULED", "PUBLISHED", "ARCHIVED"),
}


def _enum(name: str) -> postgresql.ENUM:
    # Types are created up front with checkfirst; never implicitly per table
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps shared by every model."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _user_fk(column: str = "user_id", ondelete: str = "CASCADE") -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint([column], ["users.id"], ondelete=ondelete)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # ============================================
    # Accounts
    # ============================================

    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("academic_level", sa.String(length=50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_complete", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("role", _enum("user_role"), nullable=False, server_default="STUDENT"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "subscription_type",
            _enum("subscription_plan"),
            nullable=False,
            server_default="FREE",
        ),
        sa.Column("subscription_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("free_applications_used", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_subscription_type"), "users", ["subscription_type"])

    op.create_table(
        "documents",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("document_type", sa.String(length=50), nullable=False),
        sa.Column("file_url", sa.String(length=500), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=False),
        sa.Column(
            "uploaded_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
    )
    op.create_index(op.f("ix_documents_user_id"), "documents", ["user_id"])

    op.create_table(
        "password_reset_tokens",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
        sa.UniqueConstraint("token_hash"),
    )
    op.create_index(op.f("ix_password_reset_tokens_user_id"), "password_reset_tokens", ["user_id"])

    # ============================================
    # Subscriptions and payments
    # ============================================

    op.create_table(
        "subscriptions",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("plan_type", _enum("subscription_plan"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="USD"),
        sa.Column(
            "status",
            _enum("subscription_status"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("payment_method", _enum("payment_method"), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
    )
    op.create_index(op.f("ix_subscriptions_user_id"), "subscriptions", ["user_id"])
    op.create_index(op.f("ix_subscriptions_status"), "subscriptions", ["status"])
    op.create_index(op.f("ix_subscriptions_expires_at"), "subscriptions", ["expires_at"])

    op.create_table(
        "payments",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subscription_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="USD"),
        sa.Column("payment_method", _enum("payment_method"), nullable=False),
        sa.Column("status", _enum("payment_status"), nullable=False, server_default="PENDING"),
        sa.Column("transaction_id", sa.String(length=255), nullable=True),
        sa.Column("transaction_hash", sa.String(length=255), nullable=True),
        sa.Column("payment_data", postgresql.JSON(astext_type=sa.Text()), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
        sa.ForeignKeyConstraint(["subscription_id"], ["subscriptions.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_payments_user_id"), "payments", ["user_id"])
    op.create_index(op.f("ix_payments_subscription_id"), "payments", ["subscription_id"])
    op.create_index(op.f("ix_payments_status"), "payments", ["status"])

    # ============================================
    # Catalogue
    # ============================================

    op.create_table(
        "universities",
        *_base_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("region", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("ranking", sa.Integer(), nullable=True),
        sa.Column("tuition_range", sa.String(length=100), nullable=True),
        sa.Column("has_scholarships", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_universities_name"), "universities", ["name"])
    op.create_index(op.f("ix_universities_country"), "universities", ["country"])
    op.create_index(op.f("ix_universities_region"), "universities", ["region"])
    op.create_index(op.f("ix_universities_ranking"), "universities", ["ranking"])

    op.create_table(
        "programs",
        *_base_columns(),
        sa.Column("university_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("field", sa.String(length=100), nullable=True),
        sa.Column("level", sa.String(length=50), nullable=True),
        sa.Column("duration", sa.String(length=50), nullable=True),
        sa.Column("tuition_fee", sa.Numeric(10, 2), nullable=True),
        sa.Column("language", sa.String(length=50), nullable=True),
        sa.Column("intake", sa.String(length=100), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["university_id"], ["universities.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_programs_university_id"), "programs", ["university_id"])
    op.create_index(op.f("ix_programs_field"), "programs", ["field"])
    op.create_index(op.f("ix_programs_level"), "programs", ["level"])

    op.create_table(
        "applications",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("university_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("program_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "status",
            _enum("application_status"),
            nullable=False,
            server_default="SUBMITTED",
        ),
        sa.Column("personal_statement", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("documents", postgresql.JSON(astext_type=sa.Text()), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
        sa.ForeignKeyConstraint(["university_id"], ["universities.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["program_id"], ["programs.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_applications_user_status", "applications", ["user_id", "status"])
    op.create_index("ix_applications_user_program", "applications", ["user_id", "program_id"])

    op.create_table(
        "scholarships",
        *_base_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("amount", sa.String(length=100), nullable=True),
        sa.Column("level", sa.String(length=50), nullable=True),
        sa.Column("field", sa.String(length=100), nullable=True),
        sa.Column("eligibility", sa.Text(), nullable=True),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("link", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_scholarships_country"), "scholarships", ["country"])
    op.create_index(op.f("ix_scholarships_level"), "scholarships", ["level"])
    op.create_index(op.f("ix_scholarships_deadline"), "scholarships", ["deadline"])

    # ============================================
    # Courses and consultations
    # ============================================

    op.create_table(
        "courses",
        *_base_columns(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("type", _enum("course_type"), nullable=False, server_default="FREE"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.String(length=50), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_courses_type"), "courses", ["type"])

    op.create_table(
        "course_enrollments",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("course_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "status",
            _enum("enrollment_status"),
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "enrolled_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
        sa.ForeignKeyConstraint(["course_id"], ["courses.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "course_id", name="uq_course_enrollments_user_course"),
    )
    op.create_index(op.f("ix_course_enrollments_user_id"), "course_enrollments", ["user_id"])

    op.create_table(
        "consultations",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("consultation_type", _enum("consultation_type"), nullable=False),
        sa.Column("consultant_name", sa.String(length=255), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column(
            "status",
            _enum("consultation_status"),
            nullable=False,
            server_default="SCHEDULED",
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("meeting_link", sa.String(length=500), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
    )
    op.create_index(op.f("ix_consultations_user_id"), "consultations", ["user_id"])
    op.create_index(op.f("ix_consultations_scheduled_at"), "consultations", ["scheduled_at"])
    op.create_index(op.f("ix_consultations_status"), "consultations", ["status"])

    # ============================================
    # Support and chat
    # ============================================

    op.create_table(
        "support_tickets",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column(
            "category",
            _enum("ticket_category"),
            nullable=False,
            server_default="GENERAL",
        ),
        sa.Column(
            "priority",
            _enum("ticket_priority"),
            nullable=False,
            server_default="MEDIUM",
        ),
        sa.Column("status", _enum("ticket_status"), nullable=False, server_default="OPEN"),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
    )
    op.create_index(op.f("ix_support_tickets_user_id"), "support_tickets", ["user_id"])
    op.create_index(op.f("ix_support_tickets_status"), "support_tickets", ["status"])

    op.create_table(
        "support_messages",
        *_base_columns(),
        sa.Column("ticket_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_staff", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["ticket_id"], ["support_tickets.id"], ondelete="CASCADE"),
        _user_fk(),
    )
    op.create_index(op.f("ix_support_messages_ticket_id"), "support_messages", ["ticket_id"])

    op.create_table(
        "chat_conversations",
        *_base_columns(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column(
            "last_message_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        _user_fk(),
    )
    op.create_index(op.f("ix_chat_conversations_user_id"), "chat_conversations", ["user_id"])

    op.create_table(
        "chat_messages",
        *_base_columns(),
        sa.Column("conversation_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", _enum("chat_message_role"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["conversation_id"], ["chat_conversations.id"], ondelete="CASCADE"
        ),
    )
    op.create_index(
        op.f("ix_chat_messages_conversation_id"), "chat_messages", ["conversation_id"]
    )

    # ============================================
    # Blog
    # ============================================

    op.create_table(
        "blog_categories",
        *_base_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_blog_categories_slug"), "blog_categories", ["slug"], unique=True)

    op.create_table(
        "blog_tags",
        *_base_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_blog_tags_slug"), "blog_tags", ["slug"], unique=True)

    op.create_table(
        "blog_posts",
        *_base_columns(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=120), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("featured_image", sa.String(length=500), nullable=True),
        sa.Column("featured_image_alt", sa.String(length=255), nullable=True),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", _enum("post_status"), nullable=False, server_default="DRAFT"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=True),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reading_time", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("meta_title", sa.String(length=255), nullable=True),
        sa.Column("meta_description", sa.String(length=160), nullable=True),
        sa.Column("focus_keyword", sa.String(length=100), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        _user_fk("author_id", ondelete="SET NULL"),
    )
    op.create_index(op.f("ix_blog_posts_slug"), "blog_posts", ["slug"], unique=True)
    op.create_index(op.f("ix_blog_posts_status"), "blog_posts", ["status"])
    op.create_index(op.f("ix_blog_posts_published_at"), "blog_posts", ["published_at"])

    op.create_table(
        "blog_post_categories",
        sa.Column("post_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "category_id"),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["blog_categories.id"], ondelete="CASCADE"),
    )
    op.create_table(
        "blog_post_tags",
        sa.Column("post_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tag_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
        sa.ForeignKeyConstraint(["post_id"], ["blog_posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["blog_tags.id"], ondelete="CASCADE"),
    )


def downgrade() -> None:
    for table in (
        "blog_post_tags",
        "blog_post_categories",
        "blog_posts",
        "blog_tags",
        "blog_categories",
        "chat_messages",
        "chat_conversations",
        "support_messages",
        "support_tickets",
        "consultations",
        "course_enrollments",
        "courses",
        "scholarships",
        "applications",
        "programs",
        "universities",
        "payments",
        "subscriptions",
        "password_reset_tokens",
        "documents",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
