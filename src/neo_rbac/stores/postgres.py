"""
PostgreSQL role store using asyncpg.

Expected schema (names are configurable)::

    CREATE TABLE roles (
        name        TEXT PRIMARY KEY,
        permissions TEXT[] NOT NULL DEFAULT '{}',
        parent      TEXT NULL,
        created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        deleted_at  TIMESTAMPTZ NULL
    );

    CREATE TABLE users (
        id   TEXT PRIMARY KEY,
        role TEXT NULL
    );
"""
import logging
import re
from typing import List, Optional

import asyncpg

from ..config.settings import CacheConfig, RBACSettings
from ..core.exceptions import ConfigurationError
from ..domain.role import RoleRecord
from .base import BaseRoleStore

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _validate_identifier(value: str, setting: str) -> str:
    if not value or not _IDENTIFIER_RE.match(value):
        raise ConfigurationError(f"Invalid SQL identifier for {setting}: {value!r}", setting)
    return value


class PostgresRoleStore(BaseRoleStore):
    """
    AsyncPG implementation of the role store.

    Soft-deleted roles (non-null ``deleted_at``) are filtered in SQL. Set
    ``deleted_at_column=None`` for tables without soft delete.
    """

    def __init__(
        self,
        db_pool: asyncpg.Pool,
        schema: str = "public",
        roles_table: str = "roles",
        users_table: str = "users",
        role_name_column: str = "name",
        role_permissions_column: str = "permissions",
        role_parent_column: str = "parent",
        deleted_at_column: Optional[str] = "deleted_at",
        user_id_column: str = "id",
        user_role_column: str = "role",
        cache_config: Optional[CacheConfig] = None
    ):
        """
        Initialize the store.

        Args:
            db_pool: AsyncPG connection pool
            schema: Schema holding both tables
            roles_table: Table of role rows
            users_table: Table of subject rows carrying a role name
            role_name_column: Role name column in roles_table
            role_permissions_column: Text array column of direct permissions
            role_parent_column: Nullable parent role name column
            deleted_at_column: Soft-delete timestamp column, None to disable
            user_id_column: Subject id column in users_table
            user_role_column: Role name column in users_table
            cache_config: Optional cache settings
        """
        super().__init__(cache_config)
        if db_pool is None:
            raise ConfigurationError("PostgresRoleStore requires an asyncpg pool", "db_pool")

        self._db_pool = db_pool
        self.schema = _validate_identifier(schema, "schema")
        self.roles_table = _validate_identifier(roles_table, "roles_table")
        self.users_table = _validate_identifier(users_table, "users_table")
        self.role_name_column = _validate_identifier(role_name_column, "role_name_column")
        self.role_permissions_column = _validate_identifier(
            role_permissions_column, "role_permissions_column"
        )
        self.role_parent_column = _validate_identifier(role_parent_column, "role_parent_column")
        self.deleted_at_column = (
            _validate_identifier(deleted_at_column, "deleted_at_column")
            if deleted_at_column is not None else None
        )
        self.user_id_column = _validate_identifier(user_id_column, "user_id_column")
        self.user_role_column = _validate_identifier(user_role_column, "user_role_column")

        self._find_role_query = self._build_find_role_query()
        self._subject_role_query = (
            f"SELECT {self.user_role_column} AS role "
            f"FROM {self.schema}.{self.users_table} "
            f"WHERE {self.user_id_column} = $1"
        )

    @classmethod
    def from_settings(
        cls,
        db_pool: asyncpg.Pool,
        settings: RBACSettings,
        **overrides
    ) -> "PostgresRoleStore":
        """Create a store from RBACSettings, with keyword overrides."""
        options = {
            "schema": settings.db_schema,
            "roles_table": settings.roles_table,
            "users_table": settings.users_table,
            "cache_config": settings.cache_config,
        }
        options.update(overrides)
        return cls(db_pool, **options)

    def _build_find_role_query(self) -> str:
        deleted_select = (
            f", {self.deleted_at_column} AS deleted_at" if self.deleted_at_column else ""
        )
        query = (
            f"SELECT {self.role_name_column} AS name, "
            f"{self.role_permissions_column} AS permissions, "
            f"{self.role_parent_column} AS parent{deleted_select} "
            f"FROM {self.schema}.{self.roles_table} "
            f"WHERE {self.role_name_column} = $1"
        )
        if self.deleted_at_column:
            query += f" AND {self.deleted_at_column} IS NULL"
        return query

    async def find_role(self, role_name: str) -> Optional[RoleRecord]:
        """Find a non-deleted role by name."""
        return await self.with_cache(
            self.role_cache_key(role_name),
            lambda: self._fetch_role(role_name)
        )

    async def get_subject_role(self, subject_id: str) -> Optional[str]:
        return await self.with_cache(
            self.subject_role_cache_key(subject_id),
            lambda: self._fetch_subject_role(subject_id)
        )

    async def get_role_permissions(self, role_name: str) -> List[str]:
        role = await self.find_role(role_name)
        return list(role.permissions) if role else []

    async def _fetch_role(self, role_name: str) -> Optional[RoleRecord]:
        async with self._db_pool.acquire() as conn:
            row = await conn.fetchrow(self._find_role_query, role_name)

        if row is None:
            logger.debug(f"Role {role_name} not found in {self.schema}.{self.roles_table}")
            return None

        return RoleRecord(
            name=row["name"],
            permissions=list(row["permissions"] or []),
            parent=row["parent"],
            deleted_at=row["deleted_at"] if self.deleted_at_column else None,
        )

    async def _fetch_subject_role(self, subject_id: str) -> Optional[str]:
        async with self._db_pool.acquire() as conn:
            row = await conn.fetchrow(self._subject_role_query, subject_id)
        return row["role"] if row else None
