"""
============================================================
CRC CARD — 001_records (Alembic migration)
============================================================
Responsibilities:
  - Create the `records` table backing PostgresRecordStore: one JSONB
    document per row, partitioned logically by `collection`.
  - Index what every query filters on: (collection, estate_id) for
    estate-scoped listings and a GIN index for `data @> filter`.

Collaborators:
  - legatepro.infrastructure.repositories.postgres_store

Policy:
  - Baseline migration; later changes are additive (002+).
  - Naming: pk_<table>, ix_<table>_<cols>.
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_records"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "records",
        sa.Column("collection", sa.String(64), nullable=False),
        sa.Column("id", sa.String(128), nullable=False),
        sa.Column("estate_id", sa.String(64), nullable=True),
        sa.Column(
            "data",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("collection", "id", name="pk_records"),
    )
    op.create_index(
        "ix_records_collection_estate_id", "records", ["collection", "estate_id"]
    )
    op.create_index(
        "ix_records_data", "records", ["data"], postgresql_using="gin"
    )


def downgrade() -> None:
    op.drop_index("ix_records_data", table_name="records")
    op.drop_index("ix_records_collection_estate_id", table_name="records")
    op.drop_table("records")
