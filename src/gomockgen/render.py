"""Rendering of structural type descriptors as Go type expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .errors import MalformedTypeGraphError
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
from .naming import GO_KEYWORDS, GO_PREDECLARED, guess_alias


@dataclass(frozen=True)
class Import:
    path: str
    alias: str


class ImportSet:
    """Per-file import table mapping package paths to unique aliases.

    Aliases are allocated on first use, so a fixed traversal order yields a
    fixed table.
    """

    def __init__(self, reserved: Iterable[str] = ()):
        self._by_path: dict[str, str] = {}
        self._taken: set[str] = set(GO_KEYWORDS) | set(GO_PREDECLARED) | set(reserved)

    def alias(self, path: str) -> str:
        existing = self._by_path.get(path)
        if existing is not None:
            return existing
        base = guess_alias(path)
        alias = base
        n = 1
        while alias in self._taken:
            alias = f"{base}{n}"
            n += 1
        self._taken.add(alias)
        self._by_path[path] = alias
        return alias

    def imports(self) -> list[Import]:
        return [Import(path=p, alias=a) for p, a in sorted(self._by_path.items())]


def render_type(
    t: TypeDescriptor,
    *,
    source_pkg: str,
    target_pkg: str,
    imports: ImportSet | None = None,
) -> str:
    """Render `t` as Go source valid inside `target_pkg`.

    Named types declared in `target_pkg` are left unqualified; all others are
    qualified by the alias of their declaring package. A Named node with an
    empty package belongs to `source_pkg`.
    """
    return _Renderer(source_pkg=source_pkg, target_pkg=target_pkg, imports=imports).render(t)


class _Renderer:
    def __init__(self, *, source_pkg: str, target_pkg: str, imports: ImportSet | None):
        self.source_pkg = source_pkg
        self.target_pkg = target_pkg
        self.imports = imports
        self._active: set[int] = set()

    def render(self, t: TypeDescriptor) -> str:
        key = id(t)
        if key in self._active:
            raise MalformedTypeGraphError(f"cyclic type graph at {type(t).__name__}")
        self._active.add(key)
        try:
            return self._render(t)
        finally:
            self._active.discard(key)

    def _render(self, t: TypeDescriptor) -> str:
        if isinstance(t, Builtin):
            if not t.name:
                raise MalformedTypeGraphError("builtin type without a name")
            return t.name
        if isinstance(t, Named):
            return self._named(t)
        if isinstance(t, Pointer):
            return "*" + self.render(t.elem)
        if isinstance(t, Slice):
            return "[]" + self.render(t.elem)
        if isinstance(t, Variadic):
            return "..." + self.render(t.elem)
        if isinstance(t, Array):
            return f"[{t.length}]" + self.render(t.elem)
        if isinstance(t, Map):
            return f"map[{self.render(t.key)}]{self.render(t.value)}"
        if isinstance(t, Chan):
            return self._chan(t)
        if isinstance(t, Func):
            return self.signature(t.params, t.results)
        if isinstance(t, Interface):
            return "interface{}"
        raise MalformedTypeGraphError(f"unrenderable type node {t!r}")

    def _named(self, t: Named) -> str:
        if not t.name:
            raise MalformedTypeGraphError("named type without a name")
        pkg = t.package or self.source_pkg
        if not pkg or pkg == self.target_pkg:
            return t.name
        alias = self.imports.alias(pkg) if self.imports is not None else guess_alias(pkg)
        return f"{alias}.{t.name}"

    def _chan(self, t: Chan) -> str:
        elem = self.render(t.elem)
        if t.dir is ChanDir.SEND:
            return "chan<- " + elem
        if t.dir is ChanDir.RECV:
            return "<-chan " + elem
        if t.dir is ChanDir.BOTH:
            # `chan <-chan T` would parse as `chan<- (chan T)`.
            if isinstance(t.elem, Chan) and t.elem.dir is ChanDir.RECV:
                return f"chan ({elem})"
            return "chan " + elem
        raise MalformedTypeGraphError(f"invalid channel direction {t.dir!r}")

    def signature(self, params: tuple[TypeDescriptor, ...], results: tuple[TypeDescriptor, ...]) -> str:
        out = "func(" + ", ".join(self.render(p) for p in params) + ")"
        if len(results) == 1:
            return out + " " + self.render(results[0])
        if results:
            return out + " (" + ", ".join(self.render(r) for r in results) + ")"
        return out
