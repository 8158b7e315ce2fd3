"""
Scope identity and call-chain propagation.

A scope is a unit of code (usually a function) that can own tags and
transformers. Each scope gets an opaque id the first time it is looked
at; the id is the key used by every registry.

The active call chain is tracked explicitly rather than by inspecting
the interpreter stack: instrumented code enters a scope with
``enter_scope()`` or the ``@scoped`` decorator, and the scope is popped
again on every exit path. The stack lives in a ContextVar, so each
thread and each asyncio task sees its own chain.

Usage::

    handler = Scope("handler")
    engine.tags.create_local("debug", handler)

    with enter_scope(handler):
        engine.info("inside handler")

    @scoped
    def process(item):
        engine.info("processing", item)

    engine.tags.create_persistent("batch", process)
"""

import functools
import inspect
import random
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional, Set, Tuple


class Scope:
    """Explicit handle for a unit of code that can own tags/transformers.

    The id is assigned lazily by ``identify()`` and never changes
    afterwards. Two Scope objects are distinct scopes even when they
    share a name.
    """

    __slots__ = ('name', '_uid')

    def __init__(self, name: str = '<anonymous>'):
        self.name = name
        self._uid: Optional[str] = None

    @property
    def uid(self) -> str:
        return identify(self)

    def __repr__(self) -> str:
        return f"Scope({self.name!r})"


# Attribute used to attach a Scope to a plain function object
_SCOPE_ATTR = '__loggerplus_scope__'

_issued: Set[str] = set()
_issued_lock = threading.Lock()

# Guards id assignment and scope attachment; taken before _issued_lock
_assign_lock = threading.RLock()


def generate_uid() -> str:
    """Build a fresh id from two random fractions with the dots removed.

    Ids are never recycled; a collision with an already issued id
    simply draws again.
    """
    with _issued_lock:
        while True:
            uid = (repr(2 - random.random()) + repr(2 - random.random())).replace('.', '')
            if uid not in _issued:
                _issued.add(uid)
                return uid


def identify(scope: Any) -> str:
    """Return the id of a scope, assigning one on first use."""
    scope = scope_for(scope)
    uid = scope._uid
    if uid is not None:
        return uid
    with _assign_lock:
        if scope._uid is None:
            scope._uid = generate_uid()
        return scope._uid


def scope_for(obj: Any) -> Scope:
    """Resolve a Scope from a Scope or a callable.

    Functions get a Scope attached on first use so the same function
    always maps to the same scope. Bound methods resolve to their
    underlying function, so every instance shares one scope.

    Raises:
        TypeError: If obj is neither a Scope nor a callable
    """
    if isinstance(obj, Scope):
        return obj
    if not callable(obj):
        raise TypeError(f"Expected a Scope or a callable, got {type(obj).__name__}")

    target = getattr(obj, '__func__', obj)
    # functools.wraps copies __dict__, so look through to the original
    target = inspect.unwrap(target)
    existing = getattr(target, _SCOPE_ATTR, None)
    if isinstance(existing, Scope):
        return existing

    with _assign_lock:
        existing = getattr(target, _SCOPE_ATTR, None)
        if isinstance(existing, Scope):
            return existing

        name = getattr(target, '__qualname__', None) or getattr(target, '__name__', None)
        created = Scope(name or repr(target))
        try:
            setattr(target, _SCOPE_ATTR, created)
        except (AttributeError, TypeError):
            raise TypeError(
                f"Cannot attach a scope to {target!r}; pass an explicit Scope instead"
            ) from None
        return created


# =============================================================================
# Active-scope stack
# =============================================================================

# Sentinel for chain position 0: the emission entry point, never user code
EMISSION_SCOPE = Scope('<emit>')

# Outermost first; call_chain() reverses it
_ACTIVE: ContextVar[Tuple[Scope, ...]] = ContextVar('loggerplus_active_scopes', default=())


def active_scopes() -> Tuple[Scope, ...]:
    """Return the active scopes, outermost first."""
    return _ACTIVE.get()


def call_chain() -> Tuple[Scope, ...]:
    """Return the current call chain, innermost first.

    Position 0 is EMISSION_SCOPE, position 1 the immediate caller of
    the log call, and later positions its ancestors.
    """
    return (EMISSION_SCOPE,) + tuple(reversed(_ACTIVE.get()))


@contextmanager
def enter_scope(scope: Any) -> Iterator[Scope]:
    """Push a scope for the duration of a block."""
    resolved = scope_for(scope)
    token = _ACTIVE.set(_ACTIVE.get() + (resolved,))
    try:
        yield resolved
    finally:
        _ACTIVE.reset(token)


def scoped(func):
    """Decorator that makes every call to func run inside its own scope.

    Tags and transformers registered against the decorated function
    (or the original undecorated one) apply to log calls made while it
    runs. Works for plain and ``async def`` functions, and for generators
    and async generators, whose scope is pushed around every step and
    popped while they are suspended.
    """
    scope = scope_for(func)

    if inspect.isasyncgenfunction(func):
        @functools.wraps(func)
        async def async_gen_wrapper(*args, **kwargs):
            agen = func(*args, **kwargs)
            step, value = agen.asend, None
            while True:
                with enter_scope(scope):
                    try:
                        item = await step(value)
                    except StopAsyncIteration:
                        return
                try:
                    value = yield item
                    step = agen.asend
                except GeneratorExit:
                    with enter_scope(scope):
                        await agen.aclose()
                    raise
                except BaseException as e:
                    step, value = agen.athrow, e
        return async_gen_wrapper

    if inspect.isgeneratorfunction(func):
        @functools.wraps(func)
        def gen_wrapper(*args, **kwargs):
            gen = func(*args, **kwargs)
            step, value = gen.send, None
            while True:
                with enter_scope(scope):
                    try:
                        item = step(value)
                    except StopIteration as stop:
                        return stop.value
                try:
                    value = yield item
                    step = gen.send
                except GeneratorExit:
                    with enter_scope(scope):
                        gen.close()
                    raise
                except BaseException as e:
                    step, value = gen.throw, e
        return gen_wrapper

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            with enter_scope(scope):
                return await func(*args, **kwargs)
        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with enter_scope(scope):
            return func(*args, **kwargs)

    return wrapper
