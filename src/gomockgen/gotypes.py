"""Structural Go type descriptors.

The set of node classes is closed: every consumer (renderer, classifier,
descriptor decoder) handles exactly these shapes and treats anything else as
a malformed type graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ChanDir(Enum):
    BOTH = "both"
    SEND = "send"
    RECV = "recv"


@dataclass(frozen=True)
class Builtin:
    # Predeclared identifier: string, int64, error, any, ...
    name: str


@dataclass(frozen=True)
class Named:
    # `package` is the import path of the declaring package; "" means the
    # interface's own source package.
    package: str
    name: str


@dataclass(frozen=True)
class Pointer:
    elem: "TypeDescriptor"


@dataclass(frozen=True)
class Slice:
    elem: "TypeDescriptor"


@dataclass(frozen=True)
class Array:
    # Integer length or a constant expression as written in the source.
    length: int | str
    elem: "TypeDescriptor"


@dataclass(frozen=True)
class Map:
    key: "TypeDescriptor"
    value: "TypeDescriptor"


@dataclass(frozen=True)
class Chan:
    dir: ChanDir
    elem: "TypeDescriptor"


@dataclass(frozen=True)
class Func:
    params: tuple["TypeDescriptor", ...] = ()
    results: tuple["TypeDescriptor", ...] = ()


@dataclass(frozen=True)
class Interface:
    # Method sets are not modelled; every interface literal renders as interface{}.
    pass


@dataclass(frozen=True)
class Variadic:
    elem: "TypeDescriptor"


TypeDescriptor = Union[Builtin, Named, Pointer, Slice, Array, Map, Chan, Func, Interface, Variadic]

TYPE_NODES: tuple[type, ...] = (Builtin, Named, Pointer, Slice, Array, Map, Chan, Func, Interface, Variadic)

ERROR = Builtin("error")
