"""Tests for loggerplus.registry — three-tier tag and transformer registries."""

import threading
from typing import Optional, get_type_hints

import pytest

from loggerplus.errors import NotFoundError
from loggerplus.registry import TagRegistry, TieredRegistry, TransformerRegistry
from loggerplus.scope import Scope, identify


@pytest.fixture
def tags():
    return TagRegistry()


@pytest.fixture
def handler():
    return Scope("handler")


# =============================================================================
# Create
# =============================================================================

class TestCreate:
    """create_* appends in order and keeps duplicates."""

    def test_global_order(self, tags):
        tags.create_global("a")
        tags.create_global("b")
        assert tags.global_items() == ["a", "b"]

    def test_duplicates_retained(self, tags, handler):
        tags.create_local("x", handler)
        tags.create_local("x", handler)
        assert tags.local_items(handler) == ["x", "x"]

    def test_list_created_on_first_insert(self, tags, handler):
        assert not tags.has_persistent(handler)
        tags.create_persistent("p", handler)
        assert tags.has_persistent(handler)

    def test_tiers_are_independent(self, tags, handler):
        tags.create_local("local", handler)
        tags.create_persistent("persistent", handler)
        assert tags.local_items(handler) == ["local"]
        assert tags.persistent_items(handler) == ["persistent"]
        assert tags.global_items() == []

    def test_callable_scope(self, tags):
        def worker():
            pass
        tags.create_local("w", worker)
        assert tags.local_items(worker) == ["w"]


# =============================================================================
# Delete
# =============================================================================

class TestDelete:
    """delete_* removes the first occurrence or raises NotFoundError."""

    def test_delete_first_occurrence(self, tags):
        for t in ("a", "b", "a"):
            tags.create_global(t)
        tags.delete_global("a")
        assert tags.global_items() == ["b", "a"]

    def test_delete_first_item_works(self, tags):
        """Deleting the item at index 0 succeeds."""
        tags.create_global("first")
        tags.delete_global("first")
        assert tags.global_items() == []

    def test_delete_missing_global_raises(self, tags):
        tags.create_global("a")
        with pytest.raises(NotFoundError, match='global tag "zzz"'):
            tags.delete_global("zzz")
        assert tags.global_items() == ["a"]

    def test_delete_local_without_list_raises(self, tags, handler):
        with pytest.raises(NotFoundError, match="scope 'handler'"):
            tags.delete_local("x", handler)
        assert not tags.has_local(handler)

    def test_delete_missing_persistent_leaves_state(self, tags, handler):
        tags.create_persistent("keep", handler)
        before = tags.snapshot()
        with pytest.raises(NotFoundError):
            tags.delete_persistent("other", handler)
        assert tags.snapshot() == before

    def test_delete_keeps_empty_list(self, tags, handler):
        """Deleting the last item leaves an empty list; only clear removes it."""
        tags.create_local("only", handler)
        tags.delete_local("only", handler)
        assert tags.has_local(handler)
        assert tags.local_items(handler) == []

    def test_not_found_is_lookup_error(self, tags):
        with pytest.raises(LookupError):
            tags.delete_global("nope")


# =============================================================================
# Clear
# =============================================================================

class TestClear:
    """clear_* drops whole lists."""

    def test_clear_global_always_succeeds(self, tags):
        tags.clear_global()
        tags.create_global("a")
        tags.clear_global()
        assert tags.global_items() == []

    def test_clear_persistent_twice(self, tags, handler):
        """Second clear on the same scope fails: the list is gone."""
        tags.create_persistent("one", handler)
        tags.create_persistent("two", handler)
        tags.clear_persistent(handler)
        assert tags.persistent_items(handler) == []
        assert not tags.has_persistent(handler)
        with pytest.raises(NotFoundError, match="because there are none"):
            tags.clear_persistent(handler)

    def test_clear_local_missing_raises(self, tags, handler):
        with pytest.raises(NotFoundError):
            tags.clear_local(handler)

    def test_clear_only_touches_one_scope(self, tags, handler):
        other = Scope("other")
        tags.create_local("h", handler)
        tags.create_local("o", other)
        tags.clear_local(handler)
        assert tags.local_items(other) == ["o"]


# =============================================================================
# Snapshot & transformers
# =============================================================================

class TestSnapshot:

    def test_snapshot_keyed_by_scope_id(self, tags, handler):
        tags.create_global("g")
        tags.create_local("l", handler)
        snap = tags.snapshot()
        assert snap.global_items == ("g",)
        assert snap.local == {identify(handler): ("l",)}
        assert snap.persistent == {}

    def test_snapshot_is_a_copy(self, tags):
        tags.create_global("g")
        snap = tags.snapshot()
        tags.create_global("later")
        assert snap.global_items == ("g",)

    def test_concurrent_mutation(self, tags, handler):
        """Parallel creates from many threads all land."""
        def add(n):
            for i in range(200):
                tags.create_persistent(f"{n}-{i}", handler)

        threads = [threading.Thread(target=add, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(tags.persistent_items(handler)) == 1600


class TestTransformerRegistry:
    """Transformer registries share the tag semantics."""

    def test_delete_by_identity(self, handler):
        reg = TransformerRegistry("text transformers")
        upper = str.upper
        reg.create_local(upper, handler)
        reg.delete_local(upper, handler)
        assert reg.local_items(handler) == []

    def test_error_names_transformer(self):
        reg = TransformerRegistry()

        def shout(s):
            return s.upper()

        with pytest.raises(NotFoundError, match="shout"):
            reg.delete_global(shout)

    def test_registry_diagnostics(self, diag_buf, handler):
        """Mutations are reported on the registry channel when enabled."""
        from loggerplus.diagnostics import init_diagnostics
        init_diagnostics(verbosity=0, channels=["registry:1"], file=diag_buf)
        reg = TagRegistry()
        reg.create_local("dbg", handler)
        assert 'created local tag "dbg" for handler' in diag_buf.getvalue()


def test_registry_name_is_optional():
    """The registry name defaults from its kind and is typed Optional."""
    hints = get_type_hints(TieredRegistry.__init__)
    assert hints["name"] == Optional[str]
    assert TieredRegistry().name == "item"
