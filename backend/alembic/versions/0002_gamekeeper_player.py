"""gamekeeper player table

Revision ID: 0002_gamekeeper_player
Revises: 0001_match_and_score
Create Date: 2025-06-14
"""

from alembic import op
import sqlalchemy as sa


revision = "0002_gamekeeper_player"
down_revision = "0001_match_and_score"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "gamekeeper_player",
        sa.Column("player_id", sa.String(), primary_key=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )


def downgrade():
    op.drop_table("gamekeeper_player")
