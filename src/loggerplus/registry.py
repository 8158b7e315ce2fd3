"""
Three-tier registries for tags and transformers.

Every registry holds three tiers:

    global      — one ordered list, applies to every log call
    local       — ordered list per scope, applies only when that scope
                  is the immediate caller of the log call
    persistent  — ordered list per scope, applies to log calls made
                  from that scope and from anything it calls

Lists keep insertion order and allow duplicates. A scope's list is
created by its first insertion and removed by clear_*(); deleting an
item leaves the (possibly empty) list in place.

Deleting something that is not there raises NotFoundError and leaves
the registry untouched. Every mutation and every snapshot holds the
registry's lock, so a resolution never sees a half-applied change.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from .diagnostics import get_diagnostics, trace
from .diagnostics.levels import REGISTRY
from .errors import NotFoundError
from .scope import identify, scope_for

T = TypeVar('T')

Transformer = Callable[[Any], Any]


@dataclass(frozen=True)
class RegistrySnapshot(Generic[T]):
    """Immutable copy of a registry's three tiers, keyed by scope id."""
    global_items: Tuple[T, ...] = ()
    local: Mapping[str, Tuple[T, ...]] = field(default_factory=dict)
    persistent: Mapping[str, Tuple[T, ...]] = field(default_factory=dict)


class TieredRegistry(Generic[T]):
    """Global, local and persistent ordered lists of items.

    Scope arguments accept a Scope or a callable (see scope_for()).
    """

    # Noun used in error and diagnostic messages
    kind = 'item'

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.kind
        self._global: List[T] = []
        self._local: Dict[str, List[T]] = {}
        self._persistent: Dict[str, List[T]] = {}
        self._lock = threading.RLock()

    def describe(self, item: T) -> str:
        """Human readable name for an item in messages."""
        return f'"{item}"'

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------
    @trace
    def create_global(self, item: T) -> None:
        """Append an item that applies to every log call."""
        with self._lock:
            self._global.append(item)
        self._report('created global', item)

    @trace
    def create_local(self, item: T, scope: Any) -> None:
        """Append an item for log calls made directly from scope."""
        self._create(self._local, 'local', item, scope)

    @trace
    def create_persistent(self, item: T, scope: Any) -> None:
        """Append an item for log calls made from scope or anything it calls."""
        self._create(self._persistent, 'persistent', item, scope)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------
    @trace
    def delete_global(self, item: T) -> None:
        """Remove the first occurrence of a global item.

        Raises:
            NotFoundError: If the item is not registered globally
        """
        with self._lock:
            try:
                self._global.remove(item)
            except ValueError:
                raise NotFoundError(
                    f"Unable to delete global {self.kind} {self.describe(item)} "
                    f"because it does not exist"
                ) from None
        self._report('deleted global', item)

    @trace
    def delete_local(self, item: T, scope: Any) -> None:
        """Remove the first occurrence of item from scope's local list.

        Raises:
            NotFoundError: If scope has no local list or item is not in it
        """
        self._delete(self._local, 'local', item, scope)

    @trace
    def delete_persistent(self, item: T, scope: Any) -> None:
        """Remove the first occurrence of item from scope's persistent list.

        Raises:
            NotFoundError: If scope has no persistent list or item is not in it
        """
        self._delete(self._persistent, 'persistent', item, scope)

    # -------------------------------------------------------------------------
    # Clear
    # -------------------------------------------------------------------------
    @trace
    def clear_global(self) -> None:
        """Remove every global item."""
        with self._lock:
            self._global = []
        get_diagnostics().emit(REGISTRY, "{name}: cleared global {kind}s",
                               channel='registry', name=self.name, kind=self.kind)

    @trace
    def clear_local(self, scope: Any) -> None:
        """Drop scope's whole local list.

        Raises:
            NotFoundError: If scope has no local list
        """
        self._clear(self._local, 'local', scope)

    @trace
    def clear_persistent(self, scope: Any) -> None:
        """Drop scope's whole persistent list.

        Raises:
            NotFoundError: If scope has no persistent list
        """
        self._clear(self._persistent, 'persistent', scope)

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------
    def global_items(self) -> List[T]:
        with self._lock:
            return list(self._global)

    def local_items(self, scope: Any) -> List[T]:
        with self._lock:
            return list(self._local.get(identify(scope), []))

    def persistent_items(self, scope: Any) -> List[T]:
        with self._lock:
            return list(self._persistent.get(identify(scope), []))

    def has_local(self, scope: Any) -> bool:
        with self._lock:
            return identify(scope) in self._local

    def has_persistent(self, scope: Any) -> bool:
        with self._lock:
            return identify(scope) in self._persistent

    def snapshot(self) -> RegistrySnapshot:
        """Copy all three tiers under the lock."""
        with self._lock:
            return RegistrySnapshot(
                global_items=tuple(self._global),
                local={uid: tuple(items) for uid, items in self._local.items()},
                persistent={uid: tuple(items) for uid, items in self._persistent.items()},
            )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------
    def _create(self, tier: Dict[str, List[T]], tier_name: str, item: T, scope: Any) -> None:
        uid = identify(scope)
        with self._lock:
            tier.setdefault(uid, []).append(item)
        self._report(f'created {tier_name}', item, scope)

    def _delete(self, tier: Dict[str, List[T]], tier_name: str, item: T, scope: Any) -> None:
        uid = identify(scope)
        with self._lock:
            items = tier.get(uid)
            if items is None or item not in items:
                raise NotFoundError(
                    f"Unable to delete {tier_name} {self.kind} {self.describe(item)} "
                    f"from scope '{scope_for(scope).name}' because it does not exist"
                )
            items.remove(item)
        self._report(f'deleted {tier_name}', item, scope)

    def _clear(self, tier: Dict[str, List[T]], tier_name: str, scope: Any) -> None:
        uid = identify(scope)
        with self._lock:
            if uid not in tier:
                raise NotFoundError(
                    f"Unable to clear {tier_name} {self.kind}s from scope "
                    f"'{scope_for(scope).name}' because there are none"
                )
            del tier[uid]
        get_diagnostics().emit(REGISTRY, "{name}: cleared {tier} {kind}s of {scope}",
                               channel='registry', name=self.name, tier=tier_name,
                               kind=self.kind, scope=scope_for(scope).name)

    def _report(self, action: str, item: T, scope: Any = None) -> None:
        diag = get_diagnostics()
        if not diag.channel_active('registry', REGISTRY):
            return
        where = f" for {scope_for(scope).name}" if scope is not None else ""
        diag.emit(REGISTRY, "{name}: {action} {kind} {item}{where}",
                  channel='registry', name=self.name, action=action,
                  kind=self.kind, item=self.describe(item), where=where)


class TagRegistry(TieredRegistry[str]):
    """Registry of tag labels."""
    kind = 'tag'

    def __init__(self, name: str = 'tags'):
        super().__init__(name)


class TransformerRegistry(TieredRegistry[Transformer]):
    """Registry of transformer functions.

    Plain functions compare by identity, so deleting one needs the same
    function object that was registered.
    """
    kind = 'transformer'

    def describe(self, item: Transformer) -> str:
        name = getattr(item, '__qualname__', None) or getattr(item, '__name__', None)
        return f"<{name}>" if name else repr(item)
