"""Create the product table.

Revision ID: 5b1e7c0a9d21
Revises:
Create Date: 2025-11-03 10:12:41.118204
"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# --- Alembic identifiers ---
revision: str = "5b1e7c0a9d21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE = "product"


def upgrade() -> None:
    op.create_table(
        TABLE,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("collection", sa.String(length=255), nullable=False),
        sa.Column("scent_family", sa.String(length=255), nullable=False),
        sa.Column("size_ml", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_thb", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(length=1024), nullable=False, server_default=""),
        sa.CheckConstraint("size_ml > 0", name=op.f("ck_product_size_ml_positive")),
        sa.CheckConstraint("price_thb >= 0", name=op.f("ck_product_price_thb_nonnegative")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product")),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_product_collection", TABLE, ["collection"])
    op.create_index("ix_product_name_lower", TABLE, [sa.text("lower(name)")])


def downgrade() -> None:
    op.drop_index("ix_product_name_lower", table_name=TABLE)
    op.drop_index("ix_product_collection", table_name=TABLE)
    op.drop_table(TABLE)
