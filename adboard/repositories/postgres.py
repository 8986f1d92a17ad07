import logging
from typing import Any, Dict, List, Optional

import asyncpg
from asyncpg import Pool
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from ..exceptions import DuplicateUserError
from ..models import Base
from ..schemas.ad import Ad
from ..schemas.auth import User

logger = logging.getLogger(__name__)

# Columns a caller may write; id, counters and created_at belong to the database
AD_COLUMNS = (
    "user_id",
    "title",
    "description",
    "image_url",
    "target_url",
    "budget",
    "duration",
    "tags",
    "status",
)


def schema_statements() -> List[str]:
    """DDL for every ORM table, rendered for PostgreSQL."""
    dialect = postgresql.dialect()
    statements = []
    for table in Base.metadata.sorted_tables:
        statements.append(str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)).strip())
        for index in sorted(table.indexes, key=lambda i: i.name):
            statements.append(str(CreateIndex(index, if_not_exists=True).compile(dialect=dialect)).strip())
    return statements


class PostgresRepository:
    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 60,
        create_schema: bool = True,
        pool: Optional[Pool] = None,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.create_schema_on_startup = create_schema
        self.db = pool

    async def startup(self) -> None:
        if self.db is None:
            self.db = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )
        if self.create_schema_on_startup:
            await self.create_schema()
        logger.info("PostgreSQL repository ready")

    async def shutdown(self) -> None:
        if self.db:
            await self.db.close()

    async def create_schema(self) -> None:
        for statement in schema_statements():
            await self.db.execute(statement)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    async def create_user(self, username: str, password: str, npub: str) -> User:
        query = """
            INSERT INTO users (username, password, npub, created_at)
            VALUES ($1, $2, $3, NOW())
            RETURNING *
        """
        try:
            row = await self.db.fetchrow(query, username, password, npub)
        except asyncpg.UniqueViolationError as e:
            # Lost a race with a concurrent registration of the same npub or username
            raise DuplicateUserError(npub) from e
        return User(**dict(row))

    async def get_user(self, user_id: int) -> Optional[User]:
        row = await self.db.fetchrow("SELECT * FROM users WHERE id = $1", user_id)
        return User(**dict(row)) if row else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        row = await self.db.fetchrow("SELECT * FROM users WHERE username = $1", username)
        return User(**dict(row)) if row else None

    async def get_user_by_npub(self, npub: str) -> Optional[User]:
        row = await self.db.fetchrow("SELECT * FROM users WHERE npub = $1", npub)
        return User(**dict(row)) if row else None

    # ------------------------------------------------------------------
    # Ads
    # ------------------------------------------------------------------
    async def create_ad(self, data: Dict[str, Any]) -> Ad:
        columns = [col for col in AD_COLUMNS if col in data]
        column_list = ", ".join(columns)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        query = f"""
            INSERT INTO ads ({column_list}, impressions, clicks, created_at)
            VALUES ({placeholders}, 0, 0, NOW())
            RETURNING *
        """
        row = await self.db.fetchrow(query, *(data[col] for col in columns))
        return Ad(**dict(row))

    async def get_ad(self, ad_id: int) -> Optional[Ad]:
        row = await self.db.fetchrow("SELECT * FROM ads WHERE id = $1", ad_id)
        return Ad(**dict(row)) if row else None

    async def get_ads_by_user_id(self, user_id: int) -> List[Ad]:
        rows = await self.db.fetch("SELECT * FROM ads WHERE user_id = $1", user_id)
        return [Ad(**dict(row)) for row in rows]

    async def get_all_ads(self) -> List[Ad]:
        rows = await self.db.fetch("SELECT * FROM ads")
        return [Ad(**dict(row)) for row in rows]

    async def update_ad(self, ad_id: int, fields: Dict[str, Any]) -> Optional[Ad]:
        fields = {k: v for k, v in fields.items() if k in AD_COLUMNS}
        if not fields:
            return await self.get_ad(ad_id)

        assignments = ", ".join(f"{col} = ${i}" for i, col in enumerate(fields, start=2))
        query = f"UPDATE ads SET {assignments} WHERE id = $1 RETURNING *"
        row = await self.db.fetchrow(query, ad_id, *fields.values())
        return Ad(**dict(row)) if row else None

    async def delete_ad(self, ad_id: int) -> bool:
        deleted_id = await self.db.fetchval("DELETE FROM ads WHERE id = $1 RETURNING id", ad_id)
        return deleted_id is not None

    # Single-statement increments: the row lock makes them atomic
    async def increment_ad_impressions(self, ad_id: int) -> Optional[Ad]:
        query = "UPDATE ads SET impressions = impressions + 1 WHERE id = $1 RETURNING *"
        row = await self.db.fetchrow(query, ad_id)
        return Ad(**dict(row)) if row else None

    async def increment_ad_clicks(self, ad_id: int) -> Optional[Ad]:
        query = "UPDATE ads SET clicks = clicks + 1 WHERE id = $1 RETURNING *"
        row = await self.db.fetchrow(query, ad_id)
        return Ad(**dict(row)) if row else None
