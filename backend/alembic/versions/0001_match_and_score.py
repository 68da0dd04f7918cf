"""match and score tables

Revision ID: 0001_match_and_score
Revises:
Create Date: 2025-03-02
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_match_and_score"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "match",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("player_1", sa.String(), nullable=False),
        sa.Column("player_2", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_table(
        "score",
        sa.Column("match_id", sa.String(), sa.ForeignKey("match.id"), nullable=False),
        sa.Column("game_id", sa.String(), nullable=False),
        sa.Column("winner", sa.String(), nullable=False),
        sa.Column("winner_score", sa.SmallInteger(), nullable=False),
        sa.Column("loser_score", sa.SmallInteger(), nullable=False),
        sa.Column("played_at", sa.Date(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("match_id", "game_id"),
        sa.CheckConstraint(
            "winner_score >= loser_score",
            name="ck_score_winner_score_gte_loser_score",
        ),
        sa.CheckConstraint("loser_score >= 0", name="ck_score_loser_score_non_negative"),
    )
    op.create_index(
        "ix_score_match_id_played_at",
        "score",
        ["match_id", "played_at"],
    )


def downgrade():
    op.drop_index("ix_score_match_id_played_at", table_name="score")
    op.drop_table("score")
    op.drop_table("match")
