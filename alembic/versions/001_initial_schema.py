"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "game_sessions",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("game_mode", sa.Enum("1v1", "2v2", "freeplay", name="gamemode"), nullable=False),
        sa.Column("view_mode", sa.Enum("normal", "noMoving", "noZoom", name="viewmode"), nullable=False),
        sa.Column("max_players", sa.Integer(), nullable=False),
        sa.Column("current_players", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("waiting", "playing", "finished", name="sessionstatus"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_game_sessions_creator_id"), "game_sessions", ["creator_id"], unique=False)

    op.create_table(
        "session_players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("team", sa.Enum("team1", "team2", "solo", name="team"), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("rounds_completed", sa.Integer(), nullable=False),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["session_id"], ["game_sessions.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", "user_id", name="uq_session_players_session_user"),
    )
    op.create_index(op.f("ix_session_players_id"), "session_players", ["id"], unique=False)
    op.create_index(op.f("ix_session_players_session_id"), "session_players", ["session_id"], unique=False)
    op.create_index(op.f("ix_session_players_user_id"), "session_players", ["user_id"], unique=False)

    op.create_table(
        "round_results",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column("guess_lat", sa.Float(), nullable=True),
        sa.Column("guess_lng", sa.Float(), nullable=True),
        sa.Column("actual_lat", sa.Float(), nullable=False),
        sa.Column("actual_lng", sa.Float(), nullable=False),
        sa.Column("distance_km", sa.Integer(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["session_id"], ["game_sessions.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "session_id", "user_id", "round_number", name="uq_round_results_session_user_round"
        ),
    )
    op.create_index(op.f("ix_round_results_id"), "round_results", ["id"], unique=False)
    op.create_index(op.f("ix_round_results_session_id"), "round_results", ["session_id"], unique=False)
    op.create_index(op.f("ix_round_results_user_id"), "round_results", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_round_results_user_id"), table_name="round_results")
    op.drop_index(op.f("ix_round_results_session_id"), table_name="round_results")
    op.drop_index(op.f("ix_round_results_id"), table_name="round_results")
    op.drop_table("round_results")

    op.drop_index(op.f("ix_session_players_user_id"), table_name="session_players")
    op.drop_index(op.f("ix_session_players_session_id"), table_name="session_players")
    op.drop_index(op.f("ix_session_players_id"), table_name="session_players")
    op.drop_table("session_players")

    op.drop_index(op.f("ix_game_sessions_creator_id"), table_name="game_sessions")
    op.drop_table("game_sessions")

    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    sa.Enum(name="team").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="sessionstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="viewmode").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="gamemode").drop(op.get_bind(), checkfirst=True)
