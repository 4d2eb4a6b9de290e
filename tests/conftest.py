"""Shared pytest fixtures for zktree tests."""

from __future__ import annotations

import pytest

from tests.fakes import SAMPLE_TREE, FakeZooKeeper


@pytest.fixture()
def zk() -> FakeZooKeeper:
    """A fake client holding :data:`SAMPLE_TREE`."""
    return FakeZooKeeper().seed(SAMPLE_TREE)


@pytest.fixture()
def empty_zk() -> FakeZooKeeper:
    """A fake client with only the root and the system namespace."""
    return FakeZooKeeper()
