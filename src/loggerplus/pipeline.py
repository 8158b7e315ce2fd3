"""
The emission pipeline run by every log call.

    START ──disable_logging──────────────────────────────┐
      │                                                  │
    PREFIX ──use_micro_templates──> TEMPLATE_WAIT ──fail─┤
      │                                  │               │
      └─────────────> TRANSFORM <────────┘               │
                          │                              │
                        EMIT ──────────────────────────> DONE

START      settings are read once; disable_logging ends the call.
PREFIX     date stamp, then one '[tag]' per resolved tag.
TEMPLATE_WAIT
           one round trip to the stack-trace provider, bounded by
           template_timeout; {{key}} placeholders are filled in the
           prefix and in every str argument. A failure is reported on
           the diagnostics error channel and nothing is written.
TRANSFORM  text transformers fold over the prefix (transform_tags) and
           over str arguments; object transformers fold over deep
           copies of structured arguments.
EMIT       writer(prefix, *args), prefix omitted when empty.

Each Emission owns its prefix and argument buffers; nothing survives
the call.
"""

import copy
import enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .dates import format_date
from .diagnostics import get_diagnostics
from .diagnostics.levels import PIPELINE
from .errors import TemplateError
from .resolver import resolve
from .scope import call_chain, scope_for
from .templates import substitute


class PipelineState(enum.Enum):
    START = 'start'
    PREFIX = 'prefix'
    TEMPLATE_WAIT = 'template_wait'
    TRANSFORM = 'transform'
    EMIT = 'emit'
    DONE = 'done'


# Values that are written as they are; everything else is "structured"
_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, type(None))


def is_structured(value: Any) -> bool:
    """True for values object transformers apply to (dicts, lists, objects)."""
    return not isinstance(value, _SCALAR_TYPES)


def fold(transformers: Sequence[Callable[[Any], Any]], value: Any) -> Any:
    """Apply transformers left to right, each to the previous output."""
    for transformer in transformers:
        value = transformer(value)
    return value


class Emission:
    """One run of the pipeline for one log call.

    Args:
        engine: Source of settings, registries, provider and clock
        writer: Native writer receiving the final values
        args: The values passed to the log call
        chain: Call chain to resolve against; defaults to the active chain
    """

    def __init__(self, engine, writer: Callable[..., None],
                 args: Sequence[Any], chain: Optional[Sequence[Any]] = None):
        self.engine = engine
        self.writer = writer
        self.args: List[Any] = list(args)
        self.chain = tuple(chain) if chain is not None else call_chain()
        self.settings = None
        self.prefix = ''
        self.history: List[PipelineState] = []
        self.emitted = False
        self.error: Optional[TemplateError] = None
        self._text_transformers: Optional[list] = None
        self._object_transformers: Optional[list] = None
        self._handlers: Dict[PipelineState, Callable[[], PipelineState]] = {
            PipelineState.START: self._start,
            PipelineState.PREFIX: self._prefix,
            PipelineState.TEMPLATE_WAIT: self._template_wait,
            PipelineState.TRANSFORM: self._transform,
            PipelineState.EMIT: self._emit,
        }

    def run(self) -> None:
        """Drive the pipeline from START to DONE."""
        diag = get_diagnostics()
        state = PipelineState.START
        while state is not PipelineState.DONE:
            self.history.append(state)
            next_state = self._handlers[state]()
            diag.emit(PIPELINE, "{state} -> {next}", channel='pipeline',
                      state=state.name, next=next_state.name)
            state = next_state
        self.history.append(PipelineState.DONE)

    # -------------------------------------------------------------------------
    # States
    # -------------------------------------------------------------------------
    def _start(self) -> PipelineState:
        # Read once; later changes only affect later calls
        self.settings = copy.copy(self.engine.settings)
        if self.settings.disable_logging:
            return PipelineState.DONE
        return PipelineState.PREFIX

    def _prefix(self) -> PipelineState:
        settings = self.settings
        if settings.use_date_time:
            self.prefix = format_date(self.engine.clock(), settings.date_time_format)

        if settings.use_tags:
            tags = resolve(self.chain, self.engine.tags)
            get_diagnostics().emit(PIPELINE, "tags for {scope}: {tags}", channel='resolve',
                                   scope=self._caller_name(), tags=tags)
            self.prefix += ''.join(f"[{tag}]" for tag in tags)

        if settings.use_micro_templates:
            return PipelineState.TEMPLATE_WAIT
        return PipelineState.TRANSFORM

    def _template_wait(self) -> PipelineState:
        try:
            frame = self._await_caller_frame()
        except TemplateError as e:
            self.error = e
            get_diagnostics().error("Log call dropped, microtemplates unavailable", e)
            return PipelineState.DONE

        values = frame.template_values()
        self.prefix = substitute(self.prefix, values)
        self.args = [substitute(arg, values) if isinstance(arg, str) else arg
                     for arg in self.args]
        return PipelineState.TRANSFORM

    def _transform(self) -> PipelineState:
        settings = self.settings
        if settings.transform_tags:
            self.prefix = fold(self._text(), self.prefix)

        transformed = []
        for arg in self.args:
            if isinstance(arg, str):
                if settings.use_text_transformations:
                    arg = fold(self._text(), arg)
            elif is_structured(arg) and settings.use_object_transformations:
                arg = self._transform_object(arg)
            transformed.append(arg)
        self.args = transformed
        return PipelineState.EMIT

    def _emit(self) -> PipelineState:
        values = [self.prefix] + self.args if self.prefix else self.args
        self.writer(*values)
        self.emitted = True
        return PipelineState.DONE

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    def _text(self) -> list:
        if self._text_transformers is None:
            self._text_transformers = resolve(self.chain, self.engine.text_transformers)
        return self._text_transformers

    def _objects(self) -> list:
        if self._object_transformers is None:
            self._object_transformers = resolve(self.chain, self.engine.object_transformers)
        return self._object_transformers

    def _transform_object(self, arg: Any) -> Any:
        """Fold the object transformers over a deep copy of arg.

        Without transformers the caller's object is written as is. A
        value that cannot be deep-copied (locks, open files, generators)
        is reported on the error channel and written untransformed.
        """
        transformers = self._objects()
        if not transformers:
            return arg
        try:
            # Transformers never see the caller's object
            duplicate = copy.deepcopy(arg)
        except Exception as e:
            get_diagnostics().error(
                f"Object transformers skipped for uncopyable {type(arg).__name__}", e)
            return arg
        return fold(transformers, duplicate)

    def _await_caller_frame(self):
        timeout = self.settings.template_timeout
        diag = get_diagnostics()
        diag.emit(PIPELINE, "waiting up to {timeout}s for call-site frames",
                  channel='template', timeout=timeout)
        try:
            future = self.engine.provider.capture_chain()
        except Exception as e:
            raise TemplateError("Stack-trace provider failed to start a capture") from e

        try:
            frames = future.result(timeout=timeout)
        except TimeoutError as e:
            future.cancel()
            raise TemplateError(
                f"Stack-trace provider did not answer within {timeout}s"
            ) from e
        except Exception as e:
            raise TemplateError("Stack-trace provider failed") from e

        if len(frames) < 2:
            raise TemplateError(
                f"Stack-trace provider returned {len(frames)} frame(s); "
                f"the log call site needs at least 2"
            )
        return frames[1]

    def _caller_name(self) -> str:
        return scope_for(self.chain[1]).name if len(self.chain) > 1 else '<top level>'
