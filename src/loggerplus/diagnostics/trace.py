"""
Function tracing decorator.

Reports calls on the opt-in 'trace' diagnostic channel at level 3.
Registry operations and config loading are decorated with it, so
``init_diagnostics(channels=['trace:3'])`` shows every tag and
transformer mutation with its arguments.
"""

import functools

from .levels import TRACE


def _short_repr(value) -> str:
    if isinstance(value, str) and len(value) > 50:
        return f"'{value[:47]}...'"
    if isinstance(value, (list, tuple, dict, set)) and len(value) > 3:
        return f"[...{len(value)} items...]"
    if callable(value) and hasattr(value, '__qualname__'):
        return f"<{value.__qualname__}>"
    return repr(value)


def trace(func):
    """Decorator to trace function calls via the diagnostics output.

    Shows entry with arguments, the return value (if not None), and
    any exception raised, when the 'trace' channel is at level 3 or
    above. Methods show 'self' instead of the instance repr.
    """
    qualname = f"{func.__module__}.{func.__qualname__}"
    is_method = '.' in func.__qualname__ and '<locals>' not in func.__qualname__

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        # Lazy import to avoid circular dependency
        from .manager import get_diagnostics

        diag = get_diagnostics()
        if not diag.channel_active('trace', TRACE):
            return func(*args, **kwargs)

        shown = list(args)
        args_repr = []
        if is_method and shown:
            args_repr.append('self')
            shown = shown[1:]
        args_repr.extend(_short_repr(arg) for arg in shown)
        args_repr.extend(f"{key}={_short_repr(value)}" for key, value in kwargs.items())

        diag.emit(TRACE, "[TRACE] >> {fn}({args})",
                  channel='trace', fn=qualname, args=', '.join(args_repr))
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            diag.emit(TRACE, "[TRACE] !! {fn} raised: {exc}: {msg}",
                      channel='trace', fn=qualname,
                      exc=type(e).__name__, msg=str(e))
            raise
        if result is not None:
            diag.emit(TRACE, "[TRACE] << {fn} returned: {val}",
                      channel='trace', fn=qualname, val=_short_repr(result))
        return result

    return wrapper
