"""Interface descriptors and their JSON document form.

The descriptor document is produced by the Go source parser that drives the
generator; this module only checks its structure and builds frozen records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import DescriptorDecodeError, InterfaceNotFoundError, MalformedTypeGraphError
from .gotypes import (
    Array,
    Builtin,
    Chan,
    ChanDir,
    Func,
    Interface,
    Map,
    Named,
    Pointer,
    Slice,
    TypeDescriptor,
    Variadic,
)


@dataclass(frozen=True)
class ParamDescriptor:
    name: str
    type: TypeDescriptor


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    params: tuple[ParamDescriptor, ...] = ()
    results: tuple[ParamDescriptor, ...] = ()


@dataclass(frozen=True)
class InterfaceDescriptor:
    name: str
    methods: tuple[MethodDescriptor, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any) -> "InterfaceDescriptor":
        if not isinstance(obj, dict):
            raise DescriptorDecodeError("interface: expected object")
        name = _require_str(obj, "name", where="interface")
        raw_methods = obj.get("methods", [])
        if not isinstance(raw_methods, list):
            raise DescriptorDecodeError(f"interface {name}: methods must be a list")
        methods = tuple(
            _method_from_dict(m, where=f"interface {name}: method {i}")
            for i, m in enumerate(raw_methods)
        )
        return cls(name=name, methods=methods)


@dataclass(frozen=True)
class FileDescriptor:
    """A parsed Go source file: its package path and declared interfaces."""

    package: str
    interfaces: tuple[InterfaceDescriptor, ...] = ()

    @classmethod
    def from_dict(cls, obj: Any) -> "FileDescriptor":
        if not isinstance(obj, dict):
            raise DescriptorDecodeError("file: expected object")
        package = obj.get("package", "")
        if not isinstance(package, str):
            raise DescriptorDecodeError("file: package must be a string")
        raw_ifaces = obj.get("interfaces", [])
        if not isinstance(raw_ifaces, list):
            raise DescriptorDecodeError("file: interfaces must be a list")
        return cls(
            package=package,
            interfaces=tuple(InterfaceDescriptor.from_dict(x) for x in raw_ifaces),
        )

    def find_interface(self, name: str) -> InterfaceDescriptor:
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        raise InterfaceNotFoundError(f"interface {name} not found in file")


def _require_str(obj: dict[str, Any], key: str, *, where: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str) or not v:
        raise DescriptorDecodeError(f"{where}: missing or invalid {key!r}")
    return v


def _method_from_dict(obj: Any, *, where: str) -> MethodDescriptor:
    if not isinstance(obj, dict):
        raise DescriptorDecodeError(f"{where}: expected object")
    name = _require_str(obj, "name", where=where)
    return MethodDescriptor(
        name=name,
        params=_params_from_list(obj.get("params", []), where=f"{where} ({name}) params"),
        results=_params_from_list(obj.get("results", []), where=f"{where} ({name}) results"),
    )


def _params_from_list(items: Any, *, where: str) -> tuple[ParamDescriptor, ...]:
    if not isinstance(items, list):
        raise DescriptorDecodeError(f"{where}: expected list")
    out: list[ParamDescriptor] = []
    for i, p in enumerate(items):
        if not isinstance(p, dict):
            raise DescriptorDecodeError(f"{where}[{i}]: expected object")
        name = p.get("name", "")
        if name is None:
            name = ""
        if not isinstance(name, str):
            raise DescriptorDecodeError(f"{where}[{i}]: name must be a string")
        if "type" not in p:
            raise DescriptorDecodeError(f"{where}[{i}]: missing 'type'")
        out.append(ParamDescriptor(name=name, type=type_from_dict(p["type"])))
    return tuple(out)


def type_from_dict(obj: Any) -> TypeDescriptor:
    """Build a type node from its document form.

    Unknown kinds and missing fields are input-contract violations and raise
    MalformedTypeGraphError.
    """
    if not isinstance(obj, dict):
        raise MalformedTypeGraphError(f"type node must be an object, got {type(obj).__name__}")
    kind = obj.get("kind")

    if kind == "builtin":
        return Builtin(name=_ident(obj, "name"))
    if kind == "named":
        package = obj.get("package", "")
        if not isinstance(package, str):
            raise MalformedTypeGraphError("named type: package must be a string")
        return Named(package=package, name=_ident(obj, "name"))
    if kind == "pointer":
        return Pointer(elem=_child(obj, "elem"))
    if kind == "slice":
        return Slice(elem=_child(obj, "elem"))
    if kind == "variadic":
        return Variadic(elem=_child(obj, "elem"))
    if kind == "array":
        length = obj.get("len")
        if isinstance(length, bool) or not isinstance(length, (int, str)) or length == "":
            raise MalformedTypeGraphError("array type: invalid len")
        if isinstance(length, int) and length < 0:
            raise MalformedTypeGraphError("array type: negative len")
        return Array(length=length, elem=_child(obj, "elem"))
    if kind == "map":
        return Map(key=_child(obj, "key"), value=_child(obj, "value"))
    if kind == "chan":
        raw_dir = obj.get("dir", "both")
        try:
            chan_dir = ChanDir(raw_dir)
        except ValueError:
            raise MalformedTypeGraphError(f"chan type: invalid dir {raw_dir!r}") from None
        return Chan(dir=chan_dir, elem=_child(obj, "elem"))
    if kind == "func":
        return Func(params=_children(obj, "params"), results=_children(obj, "results"))
    if kind == "interface":
        return Interface()
    raise MalformedTypeGraphError(f"unknown type kind {kind!r}")


def _ident(obj: dict[str, Any], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str) or not v:
        raise MalformedTypeGraphError(f"{obj.get('kind')} type: missing {key!r}")
    return v


def _child(obj: dict[str, Any], key: str) -> TypeDescriptor:
    if key not in obj:
        raise MalformedTypeGraphError(f"{obj.get('kind')} type: missing {key!r}")
    return type_from_dict(obj[key])


def _children(obj: dict[str, Any], key: str) -> tuple[TypeDescriptor, ...]:
    items = obj.get(key, [])
    if not isinstance(items, list):
        raise MalformedTypeGraphError(f"{obj.get('kind')} type: {key!r} must be a list")
    return tuple(type_from_dict(x) for x in items)
