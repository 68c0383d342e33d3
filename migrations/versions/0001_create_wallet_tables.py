"""create accounts and transactions

Revision ID: 0001_wallet
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_wallet"
down_revision = None
branch_labels = None
depends_on = None

account_status = sa.Enum(
    "ACTIVE", "INACTIVE", "SUSPENDED",
    name="account_status_enum", create_constraint=True,
)
transaction_type = sa.Enum(
    "CREDIT", "DEBIT",
    name="transaction_type_enum", create_constraint=True,
)
transaction_status = sa.Enum(
    "PENDING", "COMPLETED", "FAILED", "REVERSED",
    name="transaction_status_enum", create_constraint=True,
)


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("account_number", sa.String(length=10), nullable=False),
        sa.Column("balance", sa.Numeric(15, 2), nullable=False),
        sa.Column("status", account_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_accounts_owner_id", "accounts", ["owner_id"], unique=True)
    op.create_index(
        "ix_accounts_account_number", "accounts", ["account_number"], unique=True
    )
    op.create_index("ix_accounts_status", "accounts", ["status"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("transaction_type", transaction_type, nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("counterparty_account_id", sa.Integer(), nullable=True),
        sa.Column("reference", sa.String(length=100), nullable=False),
        sa.Column("transfer_id", sa.Uuid(), nullable=True),
        sa.Column("status", transaction_status, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"]),
        sa.ForeignKeyConstraint(["counterparty_account_id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_transactions_reference", "transactions", ["reference"], unique=True
    )
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])
    op.create_index(
        "ix_transactions_counterparty_account_id",
        "transactions",
        ["counterparty_account_id"],
    )
    op.create_index("ix_transactions_transfer_id", "transactions", ["transfer_id"])
    op.create_index(
        "ix_transactions_transaction_type", "transactions", ["transaction_type"]
    )
    op.create_index("ix_transactions_status", "transactions", ["status"])
    op.create_index("ix_transactions_created_at", "transactions", ["created_at"])


def downgrade() -> None:
    op.drop_table("transactions")
    op.drop_table("accounts")
    transaction_status.drop(op.get_bind(), checkfirst=True)
    transaction_type.drop(op.get_bind(), checkfirst=True)
    account_status.drop(op.get_bind(), checkfirst=True)
