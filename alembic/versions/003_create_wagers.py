"""003: create wagers table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE wagers (
            id                  VARCHAR(64)     PRIMARY KEY,
            creator_identity    VARCHAR(32)     NOT NULL REFERENCES users (identity),
            game_id             VARCHAR(64)     NOT NULL,
            game_name           VARCHAR(255)    NOT NULL,
            game_date           TIMESTAMPTZ     NOT NULL,
            league              VARCHAR(10)     NOT NULL,
            chosen_side         VARCHAR(128)    NOT NULL,
            chosen_side_id      VARCHAR(64)     NOT NULL,
            spread              NUMERIC         NOT NULL,
            max_stake           NUMERIC         NOT NULL,
            status              VARCHAR(10)     NOT NULL DEFAULT 'open',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wagers_status     CHECK (status IN ('open', 'settled')),
            CONSTRAINT ck_wagers_league     CHECK (league IN ('nfl', 'nba')),
            CONSTRAINT ck_wagers_max_stake  CHECK (max_stake > 0)
        );
    """)
    op.execute("CREATE INDEX idx_wagers_creator ON wagers (creator_identity, created_at DESC);")
    op.execute("CREATE INDEX idx_wagers_game ON wagers (game_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wagers CASCADE;")
