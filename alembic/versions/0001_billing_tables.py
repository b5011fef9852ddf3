"""create customers, shipments, rates, invoices, invoice items and generation logs

Revision ID: a1f0c2d4e6b8
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "a1f0c2d4e6b8"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.execute("CREATE TYPE invoice_status AS ENUM ("
               "'pending', 'paid', 'overdue', 'partially_paid')")
    op.execute("CREATE TYPE generation_status AS ENUM ('pending', 'success', 'failed')")

    op.create_table(
        "customers",
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_customers_id"), "customers", ["id"], unique=False)

    op.create_table(
        "shipments",
        sa.Column("shipment_ref", sa.String(64), nullable=False),
        sa.Column("customer_id", sa.UUID(), nullable=True),
        sa.Column("origin", sa.String(120), nullable=True),
        sa.Column("destination", sa.String(120), nullable=True),
        sa.Column("weight", sa.Numeric(10, 2), nullable=True),
        sa.Column("service_type", sa.String(32), nullable=False, server_default="standard"),
        sa.Column("status", sa.String(32), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_shipments_id"), "shipments", ["id"], unique=False)
    op.create_index(op.f("ix_shipments_shipment_ref"), "shipments", ["shipment_ref"], unique=True)
    op.create_index(op.f("ix_shipments_customer_id"), "shipments", ["customer_id"], unique=False)

    op.create_table(
        "rates",
        sa.Column("origin", sa.String(120), nullable=False),
        sa.Column("destination", sa.String(120), nullable=False),
        sa.Column("service_type", sa.String(32), nullable=True),
        sa.Column("rate_per_kg", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("base_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("min_weight", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("effective_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_rates_id"), "rates", ["id"], unique=False)
    op.create_index("ix_rates_lane", "rates", ["origin", "destination", "service_type"], unique=False)

    op.create_table(
        "invoices",
        sa.Column("invoice_ref", sa.String(64), nullable=False),
        sa.Column("customer_id", sa.UUID(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", postgresql.ENUM("pending", "paid", "overdue", "partially_paid",
                  name="invoice_status", create_type=False), nullable=False),
        sa.Column("invoice_date", sa.Date(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("pdf_path", sa.String(500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_invoices_id"), "invoices", ["id"], unique=False)
    op.create_index(op.f("ix_invoices_invoice_ref"), "invoices", ["invoice_ref"], unique=True)
    op.create_index(op.f("ix_invoices_customer_id"), "invoices", ["customer_id"], unique=False)
    op.create_index(op.f("ix_invoices_status"), "invoices", ["status"], unique=False)

    op.create_table(
        "invoice_items",
        sa.Column("invoice_id", sa.UUID(), nullable=False),
        sa.Column("shipment_id", sa.UUID(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["shipment_id"], ["shipments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_invoice_items_id"), "invoice_items", ["id"], unique=False)
    op.create_index(op.f("ix_invoice_items_invoice_id"), "invoice_items", ["invoice_id"], unique=False)
    op.create_index(op.f("ix_invoice_items_shipment_id"), "invoice_items", ["shipment_id"], unique=False)

    op.create_table(
        "invoice_generation_logs",
        sa.Column("invoice_id", sa.UUID(), nullable=False),
        sa.Column("status", postgresql.ENUM("pending", "success", "failed",
                  name="generation_status", create_type=False), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("finished_at", sa.DateTime(), nullable=True),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_invoice_generation_logs_id"), "invoice_generation_logs", ["id"], unique=False)
    op.create_index(op.f("ix_invoice_generation_logs_invoice_id"), "invoice_generation_logs", ["invoice_id"], unique=False)
    op.create_index(op.f("ix_invoice_generation_logs_started_at"), "invoice_generation_logs", ["started_at"], unique=False)


def downgrade() -> None:
    op.drop_table("invoice_generation_logs")
    op.drop_table("invoice_items")
    op.drop_table("invoices")
    op.drop_table("rates")
    op.drop_table("shipments")
    op.drop_table("customers")
    op.execute("DROP TYPE IF EXISTS generation_status")
    op.execute("DROP TYPE IF EXISTS invoice_status")
