from __future__ import annotations

import pytest

from lib_scoped_config.adapters.stores.memory import MemoryStore
from lib_scoped_config.application.ports import ReadableStore
from lib_scoped_config.application.snapshot import FrozenStore, Snapshot
from lib_scoped_config.domain.errors import HandleReleased
from lib_scoped_config.domain.scope import Scope


def make_stores() -> list[MemoryStore]:
    return [
        MemoryStore(Scope.SYSTEM, {"core.bare": "false", "core.editor": "vi"}),
        MemoryStore(Scope.LOCAL, {"core.bare": "true"}),
    ]


def test_snapshot_orders_scopes_by_precedence() -> None:
    with Snapshot(make_stores()) as snapshot:
        assert snapshot.scopes == (Scope.LOCAL, Scope.SYSTEM)
        store, raw = snapshot.lookup("core.bare")
        assert (store.scope, raw) == (Scope.LOCAL, "true")
        store, raw = snapshot.lookup("core.editor")
        assert (store.scope, raw) == (Scope.SYSTEM, "vi")
        assert snapshot.lookup("core.missing") is None


def test_snapshot_ignores_later_writes() -> None:
    stores = make_stores()
    snapshot = Snapshot(stores)
    stores[1].set("user.name", "Ada")
    stores[0].delete("core.editor")
    assert snapshot.lookup("user.name") is None
    assert {(scope, name) for scope, name, _ in snapshot.items()} == {
        (Scope.LOCAL, "core.bare"),
        (Scope.SYSTEM, "core.bare"),
        (Scope.SYSTEM, "core.editor"),
    }


def test_frozen_store_is_read_only() -> None:
    frozen = FrozenStore.capture(MemoryStore(Scope.GLOBAL, {"user.name": "Ada"}))
    assert isinstance(frozen, ReadableStore)
    assert frozen.get("user.name") == "Ada"
    with pytest.raises(TypeError):
        frozen.entries["user.name"] = "Grace"  # type: ignore[index]


def test_open_level_returns_none_for_missing_scope() -> None:
    with Snapshot(make_stores()) as snapshot:
        assert snapshot.open_level(Scope.GLOBAL) is None
        assert snapshot.open_level(Scope.SYSTEM).path is None


def test_released_snapshot_fails_deterministically() -> None:
    snapshot = Snapshot(make_stores())
    snapshot.release()
    snapshot.release()
    assert snapshot.released
    with pytest.raises(HandleReleased):
        snapshot.lookup("core.bare")
