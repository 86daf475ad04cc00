"""create drivers, champions and race_winners

Revision ID: 3a7f1c2d9e4b
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a7f1c2d9e4b'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driver_id", sa.String(30), nullable=False),
        sa.Column("given_name", sa.String(50), nullable=False),
        sa.Column("family_name", sa.String(50), nullable=False),
        sa.UniqueConstraint("driver_id"),
    )
    op.create_index("ix_drivers_id", "drivers", ["id"])

    op.create_table(
        "champions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("season", sa.String(4), nullable=False),
        sa.Column("driver_id", sa.String(30), sa.ForeignKey("drivers.driver_id"), nullable=False),
        sa.UniqueConstraint("season"),
    )
    op.create_index("ix_champions_id", "champions", ["id"])

    op.create_table(
        "race_winners",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("season", sa.String(4), nullable=False),
        sa.Column("round", sa.String(2), nullable=False),
        sa.Column("gp_name", sa.String(100), nullable=False),
        sa.Column("driver_id", sa.String(30), sa.ForeignKey("drivers.driver_id"), nullable=False),
        sa.UniqueConstraint("season", "round", name="unique_race_winners_season_round"),
    )
    op.create_index("ix_race_winners_id", "race_winners", ["id"])
    # Speeds WHERE season = ... for /race-winners/{year}
    op.create_index("ix_race_winners_season", "race_winners", ["season"])

def downgrade() -> None:
    op.drop_index("ix_race_winners_season", table_name="race_winners")
    op.drop_index("ix_race_winners_id", table_name="race_winners")
    op.drop_table("race_winners")
    op.drop_index("ix_champions_id", table_name="champions")
    op.drop_table("champions")
    op.drop_index("ix_drivers_id", table_name="drivers")
    op.drop_table("drivers")
