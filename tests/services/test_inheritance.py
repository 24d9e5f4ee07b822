"""Tests for role inheritance resolution."""

import pytest

from neo_rbac.config.settings import RBACSettings
from neo_rbac.core.exceptions import CircularInheritanceError, DepthExceededError
from neo_rbac.domain.role import RoleRecord
from neo_rbac.services.inheritance import (
    RoleInheritanceResolver,
    get_role_hierarchy,
    inherits_from,
    resolve_role_permissions,
)
from neo_rbac.stores.memory import InMemoryRoleStore


ALL_HIERARCHY_PERMISSIONS = {
    "read", "profile", "update", "reports", "delete", "settings", "sysadmin"
}


class TestResolvePermissions:
    """resolve_permissions walks the chain and unions direct permissions."""

    @pytest.mark.asyncio
    async def test_role_without_parent(self, resolver):
        assert await resolver.resolve_permissions("user") == {"read", "profile"}

    @pytest.mark.asyncio
    async def test_inherits_from_parent(self, resolver):
        assert await resolver.resolve_permissions("manager") == {
            "read", "profile", "update", "reports"
        }

    @pytest.mark.asyncio
    async def test_full_chain(self, resolver):
        permissions = await resolver.resolve_permissions("super-admin")

        assert permissions == ALL_HIERARCHY_PERMISSIONS
        assert len(permissions) == 7

    @pytest.mark.asyncio
    async def test_unknown_role_yields_empty_set(self, resolver):
        assert await resolver.resolve_permissions("ghost") == set()

    @pytest.mark.asyncio
    async def test_deduplicates_inherited_permissions(self):
        store = InMemoryRoleStore(roles=[
            {"name": "base", "permissions": ["read", "write"]},
            {"name": "child", "permissions": ["read", "read", "execute"], "parent": "base"},
        ])
        resolver = RoleInheritanceResolver(store)

        assert await resolver.resolve_permissions("child") == {"read", "write", "execute"}

    @pytest.mark.asyncio
    async def test_storage_order_does_not_matter(self):
        forward = InMemoryRoleStore(roles=[
            {"name": "base", "permissions": ["a", "b", "c"]},
            {"name": "child", "permissions": ["d", "e"], "parent": "base"},
        ])
        backward = InMemoryRoleStore(roles=[
            {"name": "base", "permissions": ["c", "b", "a"]},
            {"name": "child", "permissions": ["e", "d"], "parent": "base"},
        ])

        first = await RoleInheritanceResolver(forward).resolve_permissions("child")
        second = await RoleInheritanceResolver(backward).resolve_permissions("child")

        assert first == second == {"a", "b", "c", "d", "e"}

    @pytest.mark.asyncio
    async def test_is_idempotent(self, resolver):
        first = await resolver.resolve_permissions("admin")
        second = await resolver.resolve_permissions("admin")
        assert first == second

    @pytest.mark.asyncio
    async def test_empty_role_links_ancestors(self):
        store = InMemoryRoleStore(roles=[
            {"name": "base", "permissions": ["read"]},
            {"name": "bridge", "permissions": [], "parent": "base"},
            {"name": "top", "permissions": ["write"], "parent": "bridge"},
        ])

        assert await RoleInheritanceResolver(store).resolve_permissions("top") == {"read", "write"}

    @pytest.mark.asyncio
    async def test_missing_parent_stops_walk(self):
        store = InMemoryRoleStore(roles=[
            {"name": "orphan", "permissions": ["read"], "parent": "deleted-parent"},
        ])

        assert await RoleInheritanceResolver(store).resolve_permissions("orphan") == {"read"}

    @pytest.mark.asyncio
    async def test_soft_deleted_parent_is_invisible(self, hierarchy_store):
        hierarchy_store.soft_delete_role("user")

        permissions = await RoleInheritanceResolver(hierarchy_store).resolve_permissions("manager")

        assert permissions == {"update", "reports"}

    @pytest.mark.asyncio
    async def test_mutual_parents_raise(self):
        store = InMemoryRoleStore(roles=[
            {"name": "A", "permissions": ["a"], "parent": "B"},
            {"name": "B", "permissions": ["b"], "parent": "A"},
        ])

        with pytest.raises(CircularInheritanceError) as exc_info:
            await RoleInheritanceResolver(store).resolve_permissions("A")

        assert exc_info.value.role_name == "A"
        assert exc_info.value.error_code == "CIRCULAR_INHERITANCE"

    @pytest.mark.asyncio
    async def test_self_parent_raises(self):
        store = InMemoryRoleStore(roles=[
            RoleRecord(name="narcissist", permissions=["x"], parent="narcissist"),
        ])

        with pytest.raises(CircularInheritanceError):
            await RoleInheritanceResolver(store).resolve_permissions("narcissist")

    @pytest.mark.asyncio
    async def test_cycle_further_up_the_chain_raises(self):
        store = InMemoryRoleStore(roles=[
            {"name": "leaf", "permissions": [], "parent": "B"},
            {"name": "B", "permissions": [], "parent": "C"},
            {"name": "C", "permissions": [], "parent": "B"},
        ])

        with pytest.raises(CircularInheritanceError) as exc_info:
            await RoleInheritanceResolver(store).resolve_permissions("leaf")

        assert exc_info.value.role_name == "B"

    @pytest.mark.asyncio
    async def test_depth_exceeded(self, chain_store_factory):
        store = chain_store_factory(15)

        with pytest.raises(DepthExceededError) as exc_info:
            await RoleInheritanceResolver(store).resolve_permissions("role-14", max_depth=5)

        assert exc_info.value.max_depth == 5
        assert exc_info.value.details["max_depth"] == 5

    @pytest.mark.asyncio
    async def test_deep_chain_within_custom_limit(self, chain_store_factory):
        store = chain_store_factory(15)

        permissions = await RoleInheritanceResolver(store).resolve_permissions("role-14", max_depth=20)

        assert permissions == {f"perm-{i}" for i in range(15)}

    @pytest.mark.asyncio
    async def test_depth_boundary(self, chain_store_factory):
        # max_depth counts edges: 3 edges (4 roles) pass, 4 edges (5 roles) fail
        store = chain_store_factory(5)
        resolver = RoleInheritanceResolver(store, max_depth=3)

        assert await resolver.resolve_permissions("role-3") == {"perm-0", "perm-1", "perm-2", "perm-3"}
        with pytest.raises(DepthExceededError):
            await resolver.resolve_permissions("role-4")

    @pytest.mark.asyncio
    async def test_default_depth_allows_eleven_roles(self, chain_store_factory):
        store = chain_store_factory(12)
        resolver = RoleInheritanceResolver(store)

        assert len(await resolver.resolve_permissions("role-10")) == 11
        with pytest.raises(DepthExceededError):
            await resolver.resolve_permissions("role-11")

    @pytest.mark.asyncio
    async def test_zero_depth_allows_only_root_roles(self, resolver):
        assert await resolver.resolve_permissions("user", max_depth=0) == {"read", "profile"}
        with pytest.raises(DepthExceededError):
            await resolver.resolve_permissions("manager", max_depth=0)

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self):
        class BrokenStore(InMemoryRoleStore):
            async def _lookup_role(self, role_name):
                raise ConnectionError("backend unavailable")

        with pytest.raises(ConnectionError):
            await RoleInheritanceResolver(BrokenStore()).resolve_permissions("admin")

    @pytest.mark.asyncio
    async def test_from_settings(self, chain_store_factory):
        store = chain_store_factory(5)
        resolver = RoleInheritanceResolver.from_settings(store, RBACSettings(_env_file=None, max_depth=2))

        assert resolver.max_depth == 2
        with pytest.raises(DepthExceededError):
            await resolver.resolve_permissions("role-3")

    def test_negative_max_depth_rejected(self, hierarchy_store):
        with pytest.raises(ValueError):
            RoleInheritanceResolver(hierarchy_store, max_depth=-1)


class TestInheritsFrom:
    """inherits_from answers ancestry questions without raising."""

    @pytest.mark.asyncio
    async def test_direct_parent(self, resolver):
        assert await resolver.inherits_from("manager", "user") is True

    @pytest.mark.asyncio
    async def test_indirect_parent(self, resolver):
        assert await resolver.inherits_from("super-admin", "user") is True
        assert await resolver.inherits_from("super-admin", "admin") is True

    @pytest.mark.asyncio
    async def test_child_is_not_an_ancestor(self, resolver):
        assert await resolver.inherits_from("user", "manager") is False
        assert await resolver.inherits_from("admin", "super-admin") is False

    @pytest.mark.asyncio
    async def test_never_inherits_from_itself(self, resolver):
        for role in ("user", "manager", "admin", "super-admin", "ghost"):
            assert await resolver.inherits_from(role, role) is False

    @pytest.mark.asyncio
    async def test_self_parent_is_not_self_inheritance(self):
        store = InMemoryRoleStore(roles=[
            RoleRecord(name="loop", permissions=[], parent="loop"),
        ])
        assert await RoleInheritanceResolver(store).inherits_from("loop", "loop") is False

    @pytest.mark.asyncio
    async def test_unrelated_roles(self, hierarchy_store):
        hierarchy_store.set_role("guest", ["browse"])
        resolver = RoleInheritanceResolver(hierarchy_store)

        assert await resolver.inherits_from("guest", "user") is False
        assert await resolver.inherits_from("user", "guest") is False

    @pytest.mark.asyncio
    async def test_unknown_role(self, resolver):
        assert await resolver.inherits_from("ghost", "user") is False

    @pytest.mark.asyncio
    async def test_unstored_parent_still_counts(self):
        store = InMemoryRoleStore(roles=[
            {"name": "orphan", "permissions": [], "parent": "vanished"},
        ])
        assert await RoleInheritanceResolver(store).inherits_from("orphan", "vanished") is True

    @pytest.mark.asyncio
    async def test_mutual_parents_return_false(self):
        store = InMemoryRoleStore(roles=[
            {"name": "A", "permissions": [], "parent": "B"},
            {"name": "B", "permissions": [], "parent": "A"},
        ])
        resolver = RoleInheritanceResolver(store)

        assert await resolver.inherits_from("A", "B") is False
        assert await resolver.inherits_from("B", "A") is False

    @pytest.mark.asyncio
    async def test_beyond_max_depth_returns_false(self, chain_store_factory):
        store = chain_store_factory(15)
        resolver = RoleInheritanceResolver(store)

        assert await resolver.inherits_from("role-14", "role-0", max_depth=5) is False
        assert await resolver.inherits_from("role-14", "role-0", max_depth=20) is True

    @pytest.mark.asyncio
    async def test_ancestor_within_bounds_of_deep_chain(self, chain_store_factory):
        store = chain_store_factory(15)
        resolver = RoleInheritanceResolver(store)

        assert await resolver.inherits_from("role-14", "role-13", max_depth=5) is True
        assert await resolver.inherits_from("role-14", "role-9", max_depth=5) is True
        assert await resolver.inherits_from("role-14", "role-8", max_depth=5) is False

    @pytest.mark.asyncio
    async def test_mutual_parents_false_at_small_depth(self):
        store = InMemoryRoleStore(roles=[
            {"name": "A", "permissions": [], "parent": "B"},
            {"name": "B", "permissions": [], "parent": "A"},
        ])
        resolver = RoleInheritanceResolver(store)

        assert await resolver.inherits_from("A", "B", max_depth=1) is False
        assert await resolver.inherits_from("B", "A", max_depth=1) is False

    @pytest.mark.asyncio
    async def test_agrees_with_hierarchy(self, resolver):
        for role in ("user", "manager", "admin", "super-admin"):
            hierarchy = await resolver.get_hierarchy(role)
            for candidate in ("user", "manager", "admin", "super-admin"):
                expected = candidate in hierarchy[1:]
                assert await resolver.inherits_from(role, candidate) is expected


class TestGetHierarchy:
    """get_hierarchy lists the chain from role to root."""

    @pytest.mark.asyncio
    async def test_root_role(self, resolver):
        assert await resolver.get_hierarchy("user") == ["user"]

    @pytest.mark.asyncio
    async def test_single_level(self, resolver):
        assert await resolver.get_hierarchy("manager") == ["manager", "user"]

    @pytest.mark.asyncio
    async def test_ordered_child_to_root(self, resolver):
        assert await resolver.get_hierarchy("admin") == ["admin", "manager", "user"]
        assert await resolver.get_hierarchy("super-admin") == [
            "super-admin", "admin", "manager", "user"
        ]

    @pytest.mark.asyncio
    async def test_unknown_role(self, resolver):
        assert await resolver.get_hierarchy("ghost") == ["ghost"]

    @pytest.mark.asyncio
    async def test_includes_unstored_parent(self):
        store = InMemoryRoleStore(roles=[
            {"name": "orphan", "permissions": [], "parent": "vanished"},
        ])
        assert await RoleInheritanceResolver(store).get_hierarchy("orphan") == ["orphan", "vanished"]

    @pytest.mark.asyncio
    async def test_circular_raises(self):
        store = InMemoryRoleStore(roles=[
            {"name": "A", "permissions": [], "parent": "B"},
            {"name": "B", "permissions": [], "parent": "A"},
        ])

        with pytest.raises(CircularInheritanceError):
            await RoleInheritanceResolver(store).get_hierarchy("A")

    @pytest.mark.asyncio
    async def test_depth_exceeded(self, chain_store_factory):
        store = chain_store_factory(15)

        with pytest.raises(DepthExceededError):
            await RoleInheritanceResolver(store).get_hierarchy("role-14", max_depth=5)

    @pytest.mark.asyncio
    async def test_resolution_equals_union_over_hierarchy(self, hierarchy_store, resolver):
        for role in ("user", "manager", "admin", "super-admin"):
            union = set()
            for name in await resolver.get_hierarchy(role):
                union.update(await hierarchy_store.get_role_permissions(name))
            assert await resolver.resolve_permissions(role) == union


class TestBranchingHierarchy:
    """Several children may share a parent."""

    @pytest.mark.asyncio
    async def test_siblings_do_not_see_each_other(self):
        store = InMemoryRoleStore(roles=[
            {"name": "employee", "permissions": ["office.enter"]},
            {"name": "engineer", "permissions": ["code.push"], "parent": "employee"},
            {"name": "accountant", "permissions": ["ledger.write"], "parent": "employee"},
        ])
        resolver = RoleInheritanceResolver(store)

        assert await resolver.resolve_permissions("engineer") == {"office.enter", "code.push"}
        assert await resolver.resolve_permissions("accountant") == {"office.enter", "ledger.write"}
        assert await resolver.inherits_from("engineer", "accountant") is False


class TestModuleFunctions:
    """Standalone helpers build a throwaway resolver."""

    @pytest.mark.asyncio
    async def test_helpers(self, hierarchy_store):
        assert await resolve_role_permissions(hierarchy_store, "super-admin") == ALL_HIERARCHY_PERMISSIONS
        assert await inherits_from(hierarchy_store, "admin", "user") is True
        assert await get_role_hierarchy(hierarchy_store, "manager") == ["manager", "user"]

    @pytest.mark.asyncio
    async def test_helpers_respect_max_depth(self, chain_store_factory):
        store = chain_store_factory(4)

        with pytest.raises(DepthExceededError):
            await resolve_role_permissions(store, "role-3", max_depth=2)
