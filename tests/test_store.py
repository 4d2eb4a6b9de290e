"""Tests for zktree.store."""

from __future__ import annotations

import pytest

from zktree import store
from zktree.store import AlreadyExistsError, NotFoundError, StoreError


class TestErrorTranslation:
    def test_missing_node_is_not_found(self, zk):
        with pytest.raises(NotFoundError) as excinfo:
            store.get_data(zk, "/nope")
        assert "/nope" in str(excinfo.value)

    def test_existing_node_is_already_exists(self, zk):
        with pytest.raises(AlreadyExistsError):
            store.create(zk, "/top", b"again")

    def test_missing_parent_is_not_found(self, zk):
        with pytest.raises(NotFoundError):
            store.create(zk, "/no/parent", b"v")

    def test_other_kazoo_errors_are_store_errors(self, zk):
        zk.broken.add("/top")
        with pytest.raises(StoreError) as excinfo:
            store.get_data(zk, "/top")
        assert not isinstance(excinfo.value, NotFoundError)

    def test_not_empty_delete_is_store_error(self, zk):
        with pytest.raises(StoreError):
            store.delete(zk, "/app")

    def test_cause_is_preserved(self, zk):
        with pytest.raises(NotFoundError) as excinfo:
            store.get_children(zk, "/nope")
        assert excinfo.value.__cause__ is not None


class TestPrimitives:
    def test_get_children(self, zk):
        assert sorted(store.get_children(zk, "/app")) == ["name", "prod"]

    def test_get_data(self, zk):
        assert store.get_data(zk, "/top") == b"root-level"

    def test_exists(self, zk):
        assert store.exists(zk, "/top")
        assert not store.exists(zk, "/nope")

    def test_writes_use_any_version(self, zk):
        store.set_data(zk, "/top", b"new")
        store.delete(zk, "/top")
        assert zk.versions == [store.ANY_VERSION, store.ANY_VERSION]
