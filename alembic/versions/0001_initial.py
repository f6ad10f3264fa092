"""Initial schema: customers, notes, todos and their audit logs

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _audit_columns():
    return [
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("field_name", sa.String(100), nullable=True),
        sa.Column("old_value", sa.Text, nullable=True),
        sa.Column("new_value", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("last_patch_date", sa.Date, nullable=True),
        sa.Column("last_patch_version", sa.String(100), nullable=True),
        sa.Column("temperament", sa.String(20), nullable=False),
        sa.Column("topology", sa.String(20), nullable=False),
        sa.Column("dumbledore_stage", sa.Integer, nullable=False),
        sa.Column("patch_frequency", sa.String(20), nullable=False),
        sa.Column("work_load", sa.String(100), nullable=False),
        sa.Column("cloud_manager", sa.String(50), nullable=False),
        sa.Column("product_set", sa.String(255), nullable=False),
        sa.Column("msc_url", sa.String(2048), nullable=True),
        sa.Column("runbook_url", sa.String(2048), nullable=True),
        sa.Column("snow_url", sa.String(2048), nullable=True),
        sa.Column("archived", sa.Boolean, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
    )
    op.create_index("ix_customers_user_id", "customers", ["user_id"])
    op.create_index("ix_customers_archived", "customers", ["archived"])

    op.create_table(
        "customer_notes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id", sa.Integer,
            sa.ForeignKey("customers.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("note", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
    )
    op.create_index("ix_customer_notes_customer_id", "customer_notes", ["customer_id"])
    op.create_index("ix_customer_notes_created_at", "customer_notes", ["created_at"])
    op.create_index("ix_customer_notes_user_id", "customer_notes", ["user_id"])

    op.create_table(
        "todos",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("completed", sa.Boolean, nullable=False),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("due_date", sa.Date, nullable=True),
        sa.Column(
            "customer_id", sa.Integer,
            sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "note_id", sa.Integer,
            sa.ForeignKey("customer_notes.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
    )
    op.create_index("ix_todos_customer_id", "todos", ["customer_id"])
    op.create_index("ix_todos_user_id", "todos", ["user_id"])

    for table, fk, parent in (
        ("customer_audit_log", "customer_id", "customers.id"),
        ("customer_note_audit_log", "note_id", "customer_notes.id"),
        ("todo_audit_log", "todo_id", "todos.id"),
    ):
        op.create_table(
            table,
            *_audit_columns(),
            sa.Column(fk, sa.Integer, sa.ForeignKey(parent, ondelete="CASCADE"), nullable=False),
        )
        op.create_index(f"ix_{table}_{fk}", table, [fk])
        op.create_index(f"ix_{table}_action", table, ["action"])
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])


def downgrade() -> None:
    for table in ("todo_audit_log", "customer_note_audit_log", "customer_audit_log"):
        op.drop_table(table)
    op.drop_table("todos")
    op.drop_table("customer_notes")
    op.drop_table("customers")
