"""
Call-chain resolution.

Given the call chain of a log call (innermost first, position 0 being
the emission entry point) and a registry, resolve() returns the items
that apply, in this order:

    1. global items, in insertion order
    2. persistent items of every scope in the chain, outermost
       ancestor first, each scope's list in insertion order
    3. local items of the immediate caller (chain position 1) only

The same algorithm serves tags, text transformers and object
transformers. A scope without entries contributes nothing; resolution
never fails.
"""

from typing import Any, List, Sequence

from .registry import RegistrySnapshot, TieredRegistry
from .scope import identify


def resolve(chain: Sequence[Any], registry: TieredRegistry) -> List[Any]:
    """Resolve the items of registry that apply to chain.

    Args:
        chain: Scopes innermost first; chain[0] is the emission entry point
        registry: Tag or transformer registry

    Returns:
        New list: global ++ persistent (outer to inner) ++ local of chain[1]
    """
    return resolve_snapshot(chain, registry.snapshot())


def resolve_snapshot(chain: Sequence[Any], snapshot: RegistrySnapshot) -> List[Any]:
    """Same as resolve(), against an already taken snapshot."""
    uids = [identify(scope) for scope in chain]

    matched = list(snapshot.global_items)

    for uid in reversed(uids):
        matched.extend(snapshot.persistent.get(uid, ()))

    if len(uids) > 1:
        matched.extend(snapshot.local.get(uids[1], ()))

    return matched
