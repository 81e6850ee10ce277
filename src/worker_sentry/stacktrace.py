"""
Turns the call stack recorded for an exception into sentry frames.

A raised exception carries its own traceback.  An exception that was built but never raised
has none, in which case the stack of the code asking for the report is used instead, with
this package's own frames left out.  Frames are returned oldest call first.
"""

import dataclasses
import inspect
import itertools
import logging
import os
import reprlib
import sysconfig
from functools import cache
from types import CodeType, FrameType
from typing import Iterator, Protocol

from pydantic import BaseModel

from worker_sentry.schemas import Frame

logger = logging.getLogger(__name__)

_PACKAGE_DIR = os.path.normcase(os.path.dirname(os.path.abspath(__file__)))
_RECEIVER_NAMES = ("self", "cls")

_receiver_repr = reprlib.Repr()
_receiver_repr.maxstring = 200
_receiver_repr.maxother = 200


@dataclasses.dataclass(frozen=True)
class RawFrame:
    frame: FrameType
    lineno: int | None
    lasti: int


class TraceSource(Protocol):
    def frames(self, error: BaseException) -> Iterator[RawFrame]: ...


class TracebackSource:
    """Walks the traceback attached to a raised exception."""

    def frames(self, error: BaseException) -> Iterator[RawFrame]:
        tb = error.__traceback__
        while tb is not None:
            yield RawFrame(frame=tb.tb_frame, lineno=tb.tb_lineno, lasti=tb.tb_lasti)
            tb = tb.tb_next


class CallerStackSource:
    """Captures the current call stack, minus the innermost frames that belong to this package."""

    def frames(self, error: BaseException) -> Iterator[RawFrame]:
        captured: list[RawFrame] = []
        frame = inspect.currentframe()
        while frame is not None and _is_own_frame(frame):
            frame = frame.f_back
        while frame is not None:
            captured.append(RawFrame(frame=frame, lineno=frame.f_lineno, lasti=frame.f_lasti))
            frame = frame.f_back

        return reversed(captured)


def default_trace_source(error: BaseException) -> TraceSource:
    if error.__traceback__ is not None:
        return TracebackSource()
    return CallerStackSource()


class StackFrame(BaseModel):
    function: str | None = None
    filename: str | None = None
    lineno: int | None = None
    colno: int | None = None
    in_app: bool = True
    receiver: str | None = None

    @classmethod
    def from_raw(cls, raw: RawFrame) -> "StackFrame":
        code = raw.frame.f_code
        filename = code.co_filename or None
        lineno, colno = _code_position(code, raw.lasti)

        return cls(
            function=code.co_qualname or None,
            filename=filename,
            lineno=raw.lineno if raw.lineno is not None else lineno,
            colno=colno,
            in_app=filename is not None and not is_library_file(filename),
            receiver=_receiver_snapshot(raw.frame),
        )

    def to_sentry(self) -> Frame:
        frame: Frame = {
            "function": self.function,
            "filename": self.filename,
            "lineno": self.lineno,
            "colno": self.colno,
            "in_app": self.in_app,
        }
        if self.receiver is not None:
            frame["vars"] = {"this": self.receiver}
        return frame


def get_error_stack(error: BaseException, source: TraceSource | None = None) -> list[StackFrame]:
    """
    Extracts the frames of `error`, oldest call first.  Failures while walking the stack are
    not caught and reach the caller unchanged.
    """
    if source is None:
        source = default_trace_source(error)

    frames = [StackFrame.from_raw(raw) for raw in source.frames(error)]
    logger.debug(f"Extracted {len(frames)} frames from {type(error).__qualname__}")
    return frames


def is_native_file(filename: str) -> bool:
    # Frozen modules, exec'd strings and the like: "<frozen importlib._bootstrap>", "<string>".
    return filename.startswith("<") and filename.endswith(">")


def is_library_file(filename: str) -> bool:
    if is_native_file(filename):
        return True
    path = os.path.normcase(os.path.abspath(filename))
    return any(
        path == prefix or path.startswith(prefix + os.sep) for prefix in _library_prefixes()
    )


@cache
def _library_prefixes() -> tuple[str, ...]:
    paths = sysconfig.get_paths()
    prefixes = {
        os.path.normcase(os.path.abspath(paths[key]))
        for key in ("stdlib", "platstdlib", "purelib", "platlib")
        if paths.get(key)
    }
    return tuple(sorted(prefixes))


def _is_own_frame(frame: FrameType) -> bool:
    return os.path.normcase(os.path.dirname(os.path.abspath(frame.f_code.co_filename))) == (
        _PACKAGE_DIR
    )


def _code_position(code: CodeType, lasti: int) -> tuple[int | None, int | None]:
    if lasti < 0:
        return None, None

    # Instructions are two bytes wide, co_positions yields one entry per instruction.
    position = next(itertools.islice(code.co_positions(), lasti // 2, None), None)
    if position is None:
        return None, None

    lineno, _end_lineno, col_offset, _end_col_offset = position
    return lineno, (col_offset + 1 if col_offset is not None else None)


def _receiver_snapshot(frame: FrameType) -> str | None:
    code = frame.f_code
    if not code.co_argcount or code.co_varnames[0] not in _RECEIVER_NAMES:
        return None

    name = code.co_varnames[0]
    local_vars = frame.f_locals
    if name not in local_vars:
        return None
    return _receiver_repr.repr(local_vars[name])
