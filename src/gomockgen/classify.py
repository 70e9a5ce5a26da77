from __future__ import annotations

from enum import Enum

from .errors import MalformedTypeGraphError
from .gotypes import TYPE_NODES, Builtin, Chan, Func, Interface, Map, Pointer, Slice, TypeDescriptor


class ResultKind(Enum):
    """How a mock method extracts one configured return value."""

    # Typed error slot: ret.Error(i).
    ERROR = "error"
    # Nil-able shape: assert only when ret.Get(i) != nil.
    NILLABLE = "nillable"
    # Anything else: unconditional assertion, panics on a misconfigured mock.
    VALUE = "value"


_NILLABLE_NODES = (Pointer, Slice, Map, Chan, Interface, Func)


def classify_result(t: TypeDescriptor) -> ResultKind:
    if not isinstance(t, TYPE_NODES):
        raise MalformedTypeGraphError(f"cannot classify type node {t!r}")
    if isinstance(t, Builtin) and t.name == "error":
        return ResultKind.ERROR
    if isinstance(t, _NILLABLE_NODES):
        return ResultKind.NILLABLE
    if isinstance(t, Builtin) and t.name == "any":
        return ResultKind.NILLABLE
    return ResultKind.VALUE
