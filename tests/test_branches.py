"""Tests for timestamp branch pruning."""

import pytest

from mrreports.core.exceptions import RemoteError
from mrreports.maintenance.branches import prune_branches


class FakeBranchStore:
    def __init__(self, names, failing=()):
        self.names = list(names)
        self.failing = set(failing)
        self.deleted = []

    def list_branches(self):
        return [{"name": name} for name in self.names]

    def delete_branch(self, name):
        if name in self.failing:
            raise RemoteError(f"cannot delete {name}")
        self.deleted.append(name)


BRANCHES = ["main", "feature-x", "1706153906529", "1706153906999", "1706153906530", "99"]


def test_keeps_newest_timestamp_branches():
    store = FakeBranchStore(BRANCHES)
    result = prune_branches(store, max_branches=2)

    assert result.kept == ["1706153906999", "1706153906530"]
    assert result.deleted == ["1706153906529", "99"]
    assert store.deleted == ["1706153906529", "99"]


def test_named_branches_untouched():
    store = FakeBranchStore(BRANCHES)
    prune_branches(store, max_branches=0)
    assert "main" not in store.deleted
    assert "feature-x" not in store.deleted
    assert len(store.deleted) == 4


def test_under_limit():
    store = FakeBranchStore(BRANCHES)
    result = prune_branches(store)
    assert result.deleted == []
    assert len(result.kept) == 4


def test_failed_delete_is_recorded():
    store = FakeBranchStore(BRANCHES, failing={"99"})
    result = prune_branches(store, max_branches=2)
    assert result.deleted == ["1706153906529"]
    assert list(result.failed) == ["99"]


def test_negative_limit():
    with pytest.raises(ValueError):
        prune_branches(FakeBranchStore(BRANCHES), max_branches=-1)
