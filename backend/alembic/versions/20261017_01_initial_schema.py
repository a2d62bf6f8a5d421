"""initial schema: users and beer batches

Revision ID: 20261017_01
Revises: 
Create Date: 2026-10-17 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261017_01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _ingredient_key_columns() -> list[sa.Column]:
    return [
        sa.Column("beer_id", sa.String(length=32), nullable=False),
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=40), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)

    op.create_table(
        "beers",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=140), nullable=False),
        sa.Column("style", sa.String(length=80), nullable=False),
        sa.Column("original_gravity", sa.Float(), nullable=False),
        sa.Column("final_gravity", sa.Float(), nullable=False),
        sa.Column("brewed_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("best_before_at", sa.DateTime(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("division", sa.String(length=40), nullable=False),
        sa.Column("batch_size", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("allergens", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_beers_brewed_at"), "beers", ["brewed_at"], unique=False)
    op.create_index(op.f("ix_beers_division"), "beers", ["division"], unique=False)

    op.create_table(
        "beer_notes",
        sa.Column("beer_id", sa.String(length=32), nullable=False),
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["beer_id"], ["beers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("beer_id", "id"),
    )

    op.create_table(
        "beer_malts",
        *_ingredient_key_columns(),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("batch_number", sa.String(length=60), nullable=True),
        sa.Column("supplier", sa.String(length=120), nullable=True),
        sa.ForeignKeyConstraint(["beer_id"], ["beers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("beer_id", "id"),
    )

    op.create_table(
        "beer_hops",
        *_ingredient_key_columns(),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("alpha_acid", sa.Float(), nullable=True),
        sa.Column("timing", sa.Integer(), nullable=True),
        sa.Column("batch_number", sa.String(length=60), nullable=True),
        sa.Column("supplier", sa.String(length=120), nullable=True),
        sa.ForeignKeyConstraint(["beer_id"], ["beers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("beer_id", "id"),
    )

    op.create_table(
        "beer_yeasts",
        *_ingredient_key_columns(),
        sa.Column("yeast_type", sa.String(length=40), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("temperature_c", sa.Float(), nullable=True),
        sa.Column("batch_number", sa.String(length=60), nullable=True),
        sa.Column("supplier", sa.String(length=120), nullable=True),
        sa.ForeignKeyConstraint(["beer_id"], ["beers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("beer_id", "id"),
    )


def downgrade() -> None:
    op.drop_table("beer_yeasts")
    op.drop_table("beer_hops")
    op.drop_table("beer_malts")
    op.drop_table("beer_notes")

    op.drop_index(op.f("ix_beers_division"), table_name="beers")
    op.drop_index(op.f("ix_beers_brewed_at"), table_name="beers")
    op.drop_table("beers")

    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
