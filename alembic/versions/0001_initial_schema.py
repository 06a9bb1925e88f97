"""initial schema: accounts, catalog, billing, expenses, report scheduling

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(200), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_is_active"), "users", ["is_active"], unique=False)

    op.create_table(
        "refresh_tokens",
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_by_ip", sa.String(64), nullable=False),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("revoked_by_ip", sa.String(64), nullable=True),
        sa.Column("replaced_by_token", sa.String(255), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_refresh_tokens_id"), "refresh_tokens", ["id"], unique=False)
    op.create_index(op.f("ix_refresh_tokens_token"), "refresh_tokens", ["token"], unique=True)
    op.create_index(op.f("ix_refresh_tokens_user_id"), "refresh_tokens", ["user_id"], unique=False)

    for table, name_length in (("product_categories", 100), ("expense_categories", 100)):
        op.create_table(
            table,
            sa.Column("name", sa.String(name_length), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_id"), table, ["id"], unique=False)
        op.create_index(op.f(f"ix_{table}_is_active"), table, ["is_active"], unique=False)
        op.create_index(op.f(f"ix_{table}_user_id"), table, ["user_id"], unique=False)

    op.create_table(
        "products",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("price", sa.Numeric(18, 2), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("is_favorite", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_products_id"), "products", ["id"], unique=False)
    op.create_index(op.f("ix_products_category"), "products", ["category"], unique=False)
    op.create_index(op.f("ix_products_is_active"), "products", ["is_active"], unique=False)
    op.create_index(op.f("ix_products_user_id"), "products", ["user_id"], unique=False)

    op.create_table(
        "bills",
        sa.Column("token_number", sa.Integer(), nullable=False),
        sa.Column("bill_number", sa.String(50), nullable=False),
        sa.Column("subtotal", sa.Numeric(18, 2), nullable=False),
        sa.Column("gst", sa.Numeric(18, 2), nullable=False),
        sa.Column("service_charge", sa.Numeric(18, 2), nullable=False),
        sa.Column("total", sa.Numeric(18, 2), nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("platform", sa.String(20), nullable=False),
        sa.Column("customer_name", sa.String(100), nullable=True),
        sa.Column("customer_phone", sa.String(20), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "bill_number", name="uq_bills_user_bill_number"),
    )
    op.create_index(op.f("ix_bills_id"), "bills", ["id"], unique=False)
    op.create_index(op.f("ix_bills_bill_number"), "bills", ["bill_number"], unique=False)
    op.create_index(op.f("ix_bills_created_at"), "bills", ["created_at"], unique=False)
    op.create_index(op.f("ix_bills_user_id"), "bills", ["user_id"], unique=False)

    op.create_table(
        "bill_items",
        sa.Column("bill_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("product_name", sa.String(200), nullable=False),
        sa.Column("price", sa.Numeric(18, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("total", sa.Numeric(18, 2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["bill_id"], ["bills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_bill_items_id"), "bill_items", ["id"], unique=False)
    op.create_index(op.f("ix_bill_items_bill_id"), "bill_items", ["bill_id"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("vendor_name", sa.String(100), nullable=True),
        sa.Column("receipt_image_path", sa.String(500), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["expense_categories.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_expenses_id"), "expenses", ["id"], unique=False)
    op.create_index(op.f("ix_expenses_date"), "expenses", ["date"], unique=False)
    op.create_index(op.f("ix_expenses_category_id"), "expenses", ["category_id"], unique=False)
    op.create_index(op.f("ix_expenses_user_id"), "expenses", ["user_id"], unique=False)

    op.create_table(
        "report_schedules",
        sa.Column(
            "cadence",
            sa.Enum("Daily", "Weekly", "Monthly", name="report_cadence"),
            nullable=False,
        ),
        sa.Column(
            "category",
            sa.Enum("Sales", "Expenses", "All", name="report_category"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("scheduled_time", sa.Time(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=True),
        sa.Column("day_of_month", sa.Integer(), nullable=True),
        sa.Column("last_run", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cadence", "category", name="uq_report_schedules_cadence_category"),
    )
    op.create_index(op.f("ix_report_schedules_id"), "report_schedules", ["id"], unique=False)

    op.create_table(
        "global_settings",
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    op.drop_table("global_settings")
    op.drop_index(op.f("ix_report_schedules_id"), table_name="report_schedules")
    op.drop_table("report_schedules")
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TYPE IF EXISTS report_category")
        op.execute("DROP TYPE IF EXISTS report_cadence")
    op.drop_table("expenses")
    op.drop_table("bill_items")
    op.drop_table("bills")
    op.drop_table("products")
    op.drop_table("expense_categories")
    op.drop_table("product_categories")
    op.drop_table("refresh_tokens")
    op.drop_table("users")
