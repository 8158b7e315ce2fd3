"""
Microtemplates: call-site metadata substituted into log output.

With ``use_micro_templates`` on, the emission pipeline asks a
stack-trace provider for the frames of the current call and replaces
these placeholders in the prefix and in every string argument:

    {{caller}}        function name of the log call site
    {{filename}}      file name of the call site
    {{filepath}}      absolute path of that file
    {{linenumber}}    line of the log call
    {{columnNumber}}  column of the log call (1-based, 0 if unknown)

Unknown placeholders are left as they are.

A provider returns a Future so that slow providers (symbol servers,
source maps, remote collectors) fit the same interface; the pipeline
waits for it with a timeout.
"""

import inspect
import os
import re
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Dict, List, Protocol


TEMPLATE_PATTERN = re.compile(r'\{\{(\w+)\}\}')

TEMPLATE_KEYS = ('caller', 'filename', 'filepath', 'linenumber', 'columnNumber')

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


@dataclass(frozen=True)
class Frame:
    """Metadata of one stack frame."""
    function_name: str
    file_name: str
    file_path: str
    line_number: int
    column_number: int = 0

    def template_values(self) -> Dict[str, str]:
        """Placeholder values for this frame, keyed by template key."""
        return {
            'caller': self.function_name,
            'filename': self.file_name,
            'filepath': self.file_path,
            'linenumber': str(self.line_number),
            'columnNumber': str(self.column_number),
        }


class StackTraceProvider(Protocol):
    """Supplies the frames of the current log call, innermost first.

    Frame 0 is the emission entry point, frame 1 the immediate caller
    of the log call. The frames must describe the stack at the moment
    capture_chain() is called, even if the Future completes later.
    """

    def capture_chain(self) -> "Future[List[Frame]]":
        ...


def substitute(text: str, values: Dict[str, str]) -> str:
    """Replace {{key}} placeholders in text with values[key]."""
    if '{{' not in text:
        return text

    def _replace(match):
        key = match.group(1)
        return values[key] if key in values else match.group(0)

    return TEMPLATE_PATTERN.sub(_replace, text)


def _is_internal(path: str) -> bool:
    return os.path.abspath(path).startswith(_PACKAGE_DIR + os.sep)


def frame_from_python(frame) -> Frame:
    """Build a Frame from a live interpreter frame object."""
    info = inspect.getframeinfo(frame, context=0)
    positions = info.positions
    col_offset = positions.col_offset if positions is not None else None
    path = os.path.abspath(info.filename)
    return Frame(
        function_name=info.function,
        file_name=os.path.basename(path),
        file_path=path,
        line_number=info.lineno,
        column_number=col_offset + 1 if col_offset is not None else 0,
    )


class InspectStackProvider:
    """Default provider reading the interpreter stack.

    loggerplus' own frames at the top of the stack are collapsed into a
    single frame 0 (the public entry point the user called), so frame 1
    is always user code. The capture happens synchronously; the returned
    Future is already done.
    """

    def capture_chain(self) -> "Future[List[Frame]]":
        future: Future = Future()
        try:
            future.set_result(self._capture())
        except Exception as e:
            future.set_exception(e)
        return future

    def _capture(self) -> List[Frame]:
        raw = []
        current = inspect.currentframe()
        try:
            while current is not None:
                raw.append(current)
                current = current.f_back

            # Skip to the outermost loggerplus frame of the leading run
            entry = 0
            while entry + 1 < len(raw) and _is_internal(raw[entry + 1].f_code.co_filename):
                entry += 1

            return [frame_from_python(f) for f in raw[entry:]]
        finally:
            # Break reference cycles with live frames
            del raw
            del current
