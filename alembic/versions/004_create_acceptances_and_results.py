"""004: create acceptances and results tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE acceptances (
            id                  BIGSERIAL       PRIMARY KEY,
            wager_id            VARCHAR(64)     NOT NULL REFERENCES wagers (id),
            acceptor_identity   VARCHAR(32)     NOT NULL REFERENCES users (identity),
            amount              NUMERIC         NOT NULL,
            accepted_at         TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_acceptances_amount CHECK (amount > 0),
            CONSTRAINT uq_acceptances_wager_acceptor UNIQUE (wager_id, acceptor_identity)
        );
    """)
    op.execute("CREATE INDEX idx_acceptances_acceptor ON acceptances (acceptor_identity, accepted_at DESC);")

    # One row per wager; winning_side_id is NULL for a push.
    op.execute("""
        CREATE TABLE results (
            id                  BIGSERIAL       PRIMARY KEY,
            wager_id            VARCHAR(64)     NOT NULL REFERENCES wagers (id),
            winning_side_id     VARCHAR(64),
            home_score          INT             NOT NULL,
            away_score          INT             NOT NULL,
            settled_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_results_wager UNIQUE (wager_id),
            CONSTRAINT ck_results_scores CHECK (home_score >= 0 AND away_score >= 0)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS results CASCADE;")
    op.execute("DROP TABLE IF EXISTS acceptances CASCADE;")
