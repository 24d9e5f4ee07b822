"""Pytest configuration and fixtures for neo-rbac tests."""

from typing import List

import pytest

from neo_rbac.config.settings import CacheConfig
from neo_rbac.domain.role import RoleRecord
from neo_rbac.services.authorization import AuthorizationService
from neo_rbac.services.inheritance import RoleInheritanceResolver
from neo_rbac.stores.memory import InMemoryRoleStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore(InMemoryRoleStore):
    """In-memory store recording backend lookups that reach the dictionaries."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.role_lookups: List[str] = []
        self.subject_lookups: List[str] = []

    async def _lookup_role(self, role_name):
        self.role_lookups.append(role_name)
        return await super()._lookup_role(role_name)

    async def _lookup_subject_role(self, subject_id):
        self.subject_lookups.append(subject_id)
        return await super()._lookup_subject_role(subject_id)


def build_chain_store(length: int, prefix: str = "role") -> InMemoryRoleStore:
    """Store with roles role-0 <- role-1 <- ... each granting perm-<i>.

    role-<i> inherits from role-<i-1>; role-0 is the root.
    """
    roles = []
    for i in range(length):
        roles.append(RoleRecord(
            name=f"{prefix}-{i}",
            permissions=[f"perm-{i}"],
            parent=f"{prefix}-{i - 1}" if i > 0 else None,
        ))
    return InMemoryRoleStore(roles=roles)


@pytest.fixture
def fake_clock():
    """Manually advanced clock."""
    return FakeClock()


@pytest.fixture
def hierarchy_roles():
    """user <- manager <- admin <- super-admin."""
    return [
        {"name": "user", "permissions": ["read", "profile"]},
        {"name": "manager", "permissions": ["update", "reports"], "parent": "user"},
        {"name": "admin", "permissions": ["delete", "settings"], "parent": "manager"},
        {"name": "super-admin", "permissions": ["sysadmin"], "parent": "admin"},
    ]


@pytest.fixture
def hierarchy_store(hierarchy_roles):
    """In-memory store holding the four-level hierarchy and some subjects."""
    return InMemoryRoleStore(
        roles=hierarchy_roles,
        subjects=[
            {"id": "u-user", "role": "user"},
            {"id": "u-manager", "role": "manager"},
            {"id": "u-admin", "role": "admin"},
            {"id": "u-root", "role": "super-admin"},
        ],
    )


@pytest.fixture
def resolver(hierarchy_store):
    """Resolver over the hierarchy store."""
    return RoleInheritanceResolver(hierarchy_store)


@pytest.fixture
def flat_store():
    """Store with two unrelated roles and a subject without a known role."""
    return InMemoryRoleStore(
        roles=[
            {
                "name": "admin",
                "permissions": ["users.create", "users.read", "users.update", "users.delete"],
            },
            {"name": "user", "permissions": ["users.read"]},
        ],
        subjects=[
            {"id": "1", "role": "admin"},
            {"id": "2", "role": "user"},
        ],
    )


@pytest.fixture
def auth_service(flat_store):
    """Authorization service over the flat store."""
    return AuthorizationService(flat_store)


@pytest.fixture
def counting_store(hierarchy_roles):
    """Caching store that counts backend lookups."""
    return CountingStore(
        roles=hierarchy_roles,
        subjects=[{"id": "u-admin", "role": "admin"}],
        cache_config=CacheConfig(enabled=True, ttl=60),
    )


@pytest.fixture
def chain_store_factory():
    """Factory building linear chains of a given length."""
    return build_chain_store
