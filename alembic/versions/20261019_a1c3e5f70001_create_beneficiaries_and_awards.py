"""create beneficiaries and awards

Revision ID: a1c3e5f70001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1c3e5f70001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID_TYPE = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "beneficiaries",
        sa.Column("id", ID_TYPE, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("national_id", sa.String(length=20), nullable=False),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("registration_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("beneficiaries_pkey")),
        sa.UniqueConstraint("national_id", name=op.f("beneficiaries_national_id_key")),
    )
    op.create_index(op.f("ix_beneficiaries_id"), "beneficiaries", ["id"], unique=False)

    op.create_table(
        "awards",
        sa.Column("id", ID_TYPE, autoincrement=True, nullable=False),
        sa.Column("beneficiary_id", ID_TYPE, nullable=False),
        sa.Column("prize_ordinal", sa.Integer(), nullable=False),
        sa.Column("prize_label", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["beneficiary_id"],
            ["beneficiaries.id"],
            name=op.f("awards_beneficiary_id_fkey"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("awards_pkey")),
    )
    op.create_index(
        op.f("ix_awards_beneficiary_id"), "awards", ["beneficiary_id"], unique=False
    )
    op.create_index("ix_awards_created_at", "awards", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_awards_created_at", table_name="awards")
    op.drop_index(op.f("ix_awards_beneficiary_id"), table_name="awards")
    op.drop_table("awards")
    op.drop_index(op.f("ix_beneficiaries_id"), table_name="beneficiaries")
    op.drop_table("beneficiaries")
