"""Unit tests for collection descriptors and the Dao registry."""

from __future__ import annotations

import pytest

from arango_plugin.config import ArangoSettings
from arango_plugin.dao import CollectionDescriptor, Dao, DaoRegistry, QueryExecutor
from arango_plugin.dao.descriptor import collection_name_for, vertex_collections_for
from arango_plugin.kernel.errors import NotFoundError, ValidationError
from arango_plugin.testing.fakes import RecordingConnector


# ---------------------------------------------------------------------------
# Name derivation
# ---------------------------------------------------------------------------


class TestNames:
    @pytest.mark.parametrize(
        ("logical", "collection"),
        [("UserDao", "user"), ("UserToRoleDao", "user_to_role"), ("OrgGraphDao", "org_graph"), ("user", "user")],
    )
    def test_collection_name_for(self, logical: str, collection: str) -> None:
        assert collection_name_for(logical) == collection

    @pytest.mark.parametrize(
        ("name", "vertices"),
        [("user_to_role", ("user", "role")), ("org_graph", ("org",)), ("user", ("user",)),
         ("dept_to_user_graph", ("dept", "user"))],
    )
    def test_vertex_collections_for(self, name: str, vertices: tuple[str, ...]) -> None:
        assert vertex_collections_for(name) == vertices


class TestCollectionDescriptor:
    def test_defaults(self) -> None:
        d = CollectionDescriptor("user_to_role")
        assert d.with_collections == ("user", "role")
        assert d.graph == "user_to_role"
        assert d.allow_array_contains is False
        assert d.static_data_collection == "static_data"
        assert d.area_data_collection == "area_data"
        assert d.camel_name == "userToRole"

    def test_explicit_values(self) -> None:
        d = CollectionDescriptor(
            "org_graph", with_collections=["org", "user"], graph_name="orgs", excluded_attributes=["salt"]
        )
        assert d.with_collections == ("org", "user")
        assert d.graph == "orgs"
        assert d.hidden_attributes == ["_rev", "_key", "_status", "password", "salt"]

    def test_from_logical_name(self) -> None:
        d = CollectionDescriptor.from_logical_name("UserToRoleDao", allow_array_contains=True)
        assert d.name == "user_to_role"
        assert d.allow_array_contains is True

    @pytest.mark.parametrize(
        "kwargs",
        [{"name": "user; REMOVE"}, {"name": "user", "graph_name": "g h"},
         {"name": "user", "with_collections": ("a-b",)}, {"name": "user", "excluded_attributes": ("x y",)}],
    )
    def test_names_are_validated(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            CollectionDescriptor(**kwargs)

    def test_is_frozen(self) -> None:
        d = CollectionDescriptor("user")
        with pytest.raises((AttributeError, TypeError)):
            d.name = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# DaoRegistry
# ---------------------------------------------------------------------------


class TestDaoRegistry:
    def _registry(self, **kwargs) -> DaoRegistry:
        return DaoRegistry(QueryExecutor(RecordingConnector()), **kwargs)

    def test_register_derives_name(self) -> None:
        registry = self._registry()
        registry.register("UserToRoleDao")
        assert registry.descriptor("UserToRoleDao").name == "user_to_role"
        assert "UserToRoleDao" in registry
        assert len(registry) == 1

    def test_register_explicit_descriptor(self) -> None:
        registry = self._registry()
        registry.register("Accounts", CollectionDescriptor("account"))
        assert registry.descriptor("Accounts").name == "account"

    def test_initial_mapping(self) -> None:
        registry = self._registry(descriptors={"UserDao": CollectionDescriptor("member")})
        assert list(registry) == ["UserDao"]

    def test_settings_supply_lookup_collections(self) -> None:
        settings = ArangoSettings(username="root", database="app", static_data="codes", area_data="areas")
        registry = self._registry(settings=settings)
        d = registry.register("UserDao")
        assert d.static_data_collection == "codes"
        assert d.area_data_collection == "areas"

    def test_dao_builds_engine(self) -> None:
        registry = self._registry()
        registry.register("UserDao")
        dao = registry.dao("UserDao")
        assert isinstance(dao, Dao)
        assert dao.descriptor.name == "user"

    def test_unknown_name(self) -> None:
        with pytest.raises(NotFoundError):
            self._registry().dao("NopeDao")
