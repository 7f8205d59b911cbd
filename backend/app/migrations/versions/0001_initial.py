"""Initial schema for the nightclub POS."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


menu_category = sa.Enum("set", "bottle", "nomination", "item", "other", name="menu_category")
item_category = sa.Enum("set", "bottle", "nomination", "item", "other", name="item_category")
payment_method = sa.Enum("Cash", "Card", "QR", "Other", name="payment_method")
receipt_status = sa.Enum("active", "cancelled", "paid", name="receipt_status")
assignment_type = sa.Enum("drink_back", "receipt_back", name="assignment_type")
attendance_status = sa.Enum("open", "closed", "approved", "rejected", name="attendance_status")
attendance_reason = sa.Enum("normal", "early", "late", "dohan", name="attendance_reason")
request_status = sa.Enum("pending", "approved", "rejected", name="request_status")
payroll_status = sa.Enum("draft", "confirmed", "paid", name="payroll_status")


def upgrade() -> None:
    op.create_table(
        "store_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("organization_name", sa.String(length=128), nullable=False),
        sa.Column("tax_rate_percent", sa.Numeric(6, 3), nullable=False),
        sa.Column("service_charge_rate_percent", sa.Numeric(6, 3), nullable=False),
        sa.Column("charge_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("charge_fixed", sa.Numeric(18, 4), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="JPY"),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="Asia/Tokyo"),
        sa.Column("open_time", sa.String(length=5), nullable=False, server_default="20:00"),
        sa.Column("close_time", sa.String(length=5), nullable=False, server_default="03:00"),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "menu_item",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("category", menu_category, nullable=False),
        sa.Column("price", sa.Numeric(18, 4), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_menu_item_active", "menu_item", ["active"])

    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("role", sa.String(length=64), nullable=False, server_default="Staff"),
        sa.Column("punch_token", sa.String(length=64), nullable=True, unique=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "receipt",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payment_method", payment_method, nullable=False),
        sa.Column("discount", sa.Numeric(18, 4), nullable=False, server_default="0"),
        sa.Column("service_charge_rate_percent", sa.Numeric(6, 3), nullable=False),
        sa.Column("charge_enabled", sa.Boolean(), nullable=False),
        sa.Column("charge_fixed", sa.Numeric(18, 4), nullable=False),
        sa.Column("tax_rate_percent", sa.Numeric(6, 3), nullable=False),
        sa.Column("status", receipt_status, nullable=False, server_default="active"),
        sa.Column("note", sa.String(length=512), nullable=True),
        sa.Column("subtotal", sa.Numeric(18, 6), nullable=False),
        sa.Column("discount_applied", sa.Numeric(18, 6), nullable=False),
        sa.Column("service_charge", sa.Numeric(18, 6), nullable=False),
        sa.Column("charge_fixed_applied", sa.Numeric(18, 6), nullable=False),
        sa.Column("total_raw", sa.Numeric(18, 6), nullable=False),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("tax_included", sa.Integer(), nullable=False),
    )
    op.create_index("ix_receipt_issued_at", "receipt", ["issued_at"])
    op.create_index("ix_receipt_status_issued", "receipt", ["status", "issued_at"])

    op.create_table(
        "receipt_item",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("receipt_id", sa.String(length=32), sa.ForeignKey("receipt.id", ondelete="CASCADE")),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("category", item_category, nullable=False),
        sa.Column("unit_price", sa.Numeric(18, 4), nullable=False),
        sa.Column("qty", sa.Integer(), nullable=False),
    )
    op.create_index("ix_receipt_item_receipt_id", "receipt_item", ["receipt_id"])

    op.create_table(
        "receipt_assignment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("receipt_id", sa.String(length=32), sa.ForeignKey("receipt.id", ondelete="CASCADE")),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE")),
        sa.Column("type", assignment_type, nullable=False),
    )
    op.create_index("ix_receipt_assignment_receipt_id", "receipt_assignment", ["receipt_id"])
    op.create_index("ix_receipt_assignment_staff", "receipt_assignment", ["staff_id"])

    op.create_table(
        "guest_visit",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("checked_in_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("checked_out_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("guest_count", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(length=512), nullable=True),
    )
    op.create_index("ix_guest_visit_checked_in_at", "guest_visit", ["checked_in_at"])

    op.create_table(
        "staff_attendance_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE")),
        sa.Column("business_date", sa.Date(), nullable=False),
        sa.Column("check_in_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", attendance_status, nullable=False, server_default="open"),
        sa.Column("reason", attendance_reason, nullable=False, server_default="normal"),
        sa.Column("note", sa.String(length=512), nullable=True),
        sa.Column("audit", sa.JSON(), nullable=False),
    )
    op.create_index("ix_staff_attendance_record_business_date", "staff_attendance_record", ["business_date"])
    op.create_index("ix_staff_attendance_staff_date", "staff_attendance_record", ["staff_id", "business_date"])

    op.create_table(
        "attendance_request",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "record_id",
            sa.Integer(),
            sa.ForeignKey("staff_attendance_record.id", ondelete="CASCADE"),
        ),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE")),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("status", request_status, nullable=False, server_default="pending"),
        sa.Column("comment", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("decided_by", sa.String(length=64), nullable=True),
    )
    op.create_index("ix_attendance_request_record_id", "attendance_request", ["record_id"])
    op.create_index("ix_attendance_request_status", "attendance_request", ["status"])

    op.create_table(
        "shift_wish",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE")),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("wishes", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("staff_id", "month", name="uq_shift_wish_staff_month"),
    )
    op.create_index("ix_shift_wish_month", "shift_wish", ["month"])

    op.create_table(
        "shift_plan",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("month", sa.String(length=7), nullable=False, unique=True),
        sa.Column("assignments", sa.JSON(), nullable=False),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "staff_salary",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE"), unique=True),
        sa.Column("hourly_wage", sa.Numeric(12, 2), nullable=False),
        sa.Column("transportation_allowance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("drink_back_rate", sa.Numeric(6, 3), nullable=False, server_default="0"),
        sa.Column("receipt_back_rate", sa.Numeric(6, 3), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("effective_until", sa.Date(), nullable=True),
    )

    op.create_table(
        "payroll_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="CASCADE")),
        sa.Column("year_month", sa.String(length=7), nullable=False),
        sa.Column("work_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("work_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("base_pay", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("transportation", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("drink_back", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("receipt_back", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("adjustment", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_pay", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deduction", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("net_pay", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", payroll_status, nullable=False, server_default="draft"),
        sa.Column("note", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("staff_id", "year_month", name="uq_payroll_staff_month"),
    )
    op.create_index("ix_payroll_record_year_month", "payroll_record", ["year_month"])


def downgrade() -> None:
    op.drop_index("ix_payroll_record_year_month", table_name="payroll_record")
    op.drop_table("payroll_record")
    op.drop_table("staff_salary")
    op.drop_table("shift_plan")
    op.drop_index("ix_shift_wish_month", table_name="shift_wish")
    op.drop_table("shift_wish")
    op.drop_index("ix_attendance_request_status", table_name="attendance_request")
    op.drop_index("ix_attendance_request_record_id", table_name="attendance_request")
    op.drop_table("attendance_request")
    op.drop_index("ix_staff_attendance_staff_date", table_name="staff_attendance_record")
    op.drop_index("ix_staff_attendance_record_business_date", table_name="staff_attendance_record")
    op.drop_table("staff_attendance_record")
    op.drop_index("ix_guest_visit_checked_in_at", table_name="guest_visit")
    op.drop_table("guest_visit")
    op.drop_index("ix_receipt_assignment_staff", table_name="receipt_assignment")
    op.drop_index("ix_receipt_assignment_receipt_id", table_name="receipt_assignment")
    op.drop_table("receipt_assignment")
    op.drop_index("ix_receipt_item_receipt_id", table_name="receipt_item")
    op.drop_table("receipt_item")
    op.drop_index("ix_receipt_status_issued", table_name="receipt")
    op.drop_index("ix_receipt_issued_at", table_name="receipt")
    op.drop_table("receipt")
    op.drop_table("staff")
    op.drop_index("ix_menu_item_active", table_name="menu_item")
    op.drop_table("menu_item")
    op.drop_table("store_settings")

    bind = op.get_bind()
    for enum_type in (
        payroll_status,
        request_status,
        attendance_reason,
        attendance_status,
        assignment_type,
        receipt_status,
        payment_method,
        item_category,
        menu_category,
    ):
        enum_type.drop(bind, checkfirst=True)
