"""Initial schema: match, player, matchplayer, payment

Revision ID: 001_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create match table
    op.create_table(
        "match",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("court_number", sa.String(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(), nullable=False),
        sa.Column("fee", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(), nullable=False, server_default="UPCOMING"),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_match_date", "match", ["date"])
    op.create_index("ix_match_status", "match", ["status"])

    # Create player table
    op.create_table(
        "player",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("name_key", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name_key", name="uq_player_name_key"),
    )
    op.create_index("ix_player_name_key", "player", ["name_key"])

    # Create matchplayer join table
    op.create_table(
        "matchplayer",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="BELUM_SETOR"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["match_id"], ["match.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("match_id", "player_id", name="uq_match_player"),
    )
    op.create_index("ix_matchplayer_match_id", "matchplayer", ["match_id"])
    op.create_index("ix_matchplayer_player_id", "matchplayer", ["player_id"])

    # Create payment table
    op.create_table(
        "payment",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="PENDING"),
        sa.Column("method", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["match_id"], ["match.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_payment_player_id", "payment", ["player_id"])
    op.create_index("ix_payment_match_id", "payment", ["match_id"])


def downgrade() -> None:
    op.drop_index("ix_payment_match_id", table_name="payment")
    op.drop_index("ix_payment_player_id", table_name="payment")
    op.drop_table("payment")
    op.drop_index("ix_matchplayer_player_id", table_name="matchplayer")
    op.drop_index("ix_matchplayer_match_id", table_name="matchplayer")
    op.drop_table("matchplayer")
    op.drop_index("ix_player_name_key", table_name="player")
    op.drop_table("player")
    op.drop_index("ix_match_status", table_name="match")
    op.drop_index("ix_match_date", table_name="match")
    op.drop_table("match")
