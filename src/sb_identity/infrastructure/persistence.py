"""IdentityRepository - raw SQL over the users table."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_identity.domain.models import Identity

_UPSERT_USER_SQL = text("""
    INSERT INTO users (identity, first_name, last_name)
    VALUES (:identity, :first_name, :last_name)
    ON CONFLICT (identity) DO UPDATE
        SET first_name = EXCLUDED.first_name,
            last_name = EXCLUDED.last_name,
            updated_at = NOW()
    RETURNING identity, first_name, last_name, created_at
""")


def _row_to_identity(row: Any) -> Identity:
    return Identity(
        identity=row.identity,
        first_name=row.first_name,
        last_name=row.last_name,
        created_at=row.created_at,
    )


class IdentityRepository:
    async def upsert(
        self, db: AsyncSession, identity: str, first_name: str, last_name: str
    ) -> Identity:
        result = await db.execute(
            _UPSERT_USER_SQL,
            {"identity": identity, "first_name": first_name, "last_name": last_name},
        )
        return _row_to_identity(result.fetchone())
