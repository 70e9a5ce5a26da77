"""Declaration tree for one generated Go file and its serialization.

Synthesis builds these records; `GenerationUnit.render()` is the only place
that turns them into text. Output uses tabs and gofmt spacing so an external
formatter is optional.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .render import Import


@dataclass(frozen=True)
class Field:
    # Empty name means an unnamed parameter/result.
    name: str
    type: str


@dataclass(frozen=True)
class ExprStmt:
    expr: str


@dataclass(frozen=True)
class ShortVarDecl:
    names: tuple[str, ...]
    value: str


@dataclass(frozen=True)
class VarDecl:
    name: str
    type: str


@dataclass(frozen=True)
class Assign:
    target: str
    value: str


@dataclass(frozen=True)
class If:
    cond: str
    body: tuple["Stmt", ...]
    orelse: tuple["Stmt", ...] = ()
    init: str = ""


@dataclass(frozen=True)
class Return:
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class Blank:
    pass


Stmt = Union[ExprStmt, ShortVarDecl, VarDecl, Assign, If, Return, Blank]


@dataclass(frozen=True)
class TypeDecl:
    name: str
    doc: str
    embeds: tuple[str, ...] = ()


@dataclass(frozen=True)
class MethodDecl:
    doc: str
    receiver: Field
    name: str
    params: tuple[Field, ...]
    results: tuple[Field, ...]
    body: tuple[Stmt, ...]


Decl = Union[TypeDecl, MethodDecl]


@dataclass(frozen=True)
class GenerationUnit:
    package_path: str
    package_name: str
    header: tuple[str, ...]
    imports: tuple[Import, ...]
    decls: tuple[Decl, ...]

    @property
    def type_decls(self) -> list[TypeDecl]:
        return [d for d in self.decls if isinstance(d, TypeDecl)]

    @property
    def method_decls(self) -> list[MethodDecl]:
        return [d for d in self.decls if isinstance(d, MethodDecl)]

    def render(self) -> str:
        lines: list[str] = []
        for h in self.header:
            lines.append(_comment(h))
        if self.header:
            lines.append("")
        lines.append(f"package {self.package_name}")
        lines.append("")

        if len(self.imports) == 1:
            lines.append("import " + _import_spec(self.imports[0]))
            lines.append("")
        elif self.imports:
            lines.append("import (")
            for imp in self.imports:
                lines.append("\t" + _import_spec(imp))
            lines.append(")")
            lines.append("")

        for i, decl in enumerate(self.decls):
            if i:
                lines.append("")
            if isinstance(decl, TypeDecl):
                lines.extend(_type_decl(decl))
            elif isinstance(decl, MethodDecl):
                lines.extend(_method_decl(decl))
            else:
                raise TypeError(f"unexpected declaration {decl!r}")
        return "\n".join(lines) + "\n"


def _comment(text: str) -> str:
    return "// " + text if text else "//"


def _import_spec(imp: Import) -> str:
    # The last path element is not always the package name (gopkg.in/yaml.v2, .../v5).
    return f'{imp.alias} "{imp.path}"'


def _field(f: Field) -> str:
    return f"{f.name} {f.type}" if f.name else f.type


def _type_decl(d: TypeDecl) -> list[str]:
    lines = [_comment(line) for line in d.doc.splitlines()]
    if not d.embeds:
        lines.append(f"type {d.name} struct{{}}")
        return lines
    lines.append(f"type {d.name} struct {{")
    for e in d.embeds:
        lines.append("\t" + e)
    lines.append("}")
    return lines


def _method_decl(d: MethodDecl) -> list[str]:
    lines = [_comment(line) for line in d.doc.splitlines()]
    params = ", ".join(_field(p) for p in d.params)
    results = ""
    if len(d.results) == 1 and not d.results[0].name:
        results = " " + d.results[0].type
    elif d.results:
        results = " (" + ", ".join(_field(r) for r in d.results) + ")"
    lines.append(f"func ({_field(d.receiver)}) {d.name}({params}){results} {{")
    lines.extend(_block(d.body, depth=1))
    lines.append("}")
    return lines


def _block(stmts: tuple[Stmt, ...], *, depth: int) -> list[str]:
    out: list[str] = []
    for s in stmts:
        out.extend(_stmt(s, depth=depth))
    return out


def _stmt(s: Stmt, *, depth: int) -> list[str]:
    ind = "\t" * depth
    if isinstance(s, Blank):
        return [""]
    if isinstance(s, ExprStmt):
        return [ind + s.expr]
    if isinstance(s, ShortVarDecl):
        return [f"{ind}{', '.join(s.names)} := {s.value}"]
    if isinstance(s, VarDecl):
        return [f"{ind}var {s.name} {s.type}"]
    if isinstance(s, Assign):
        return [f"{ind}{s.target} = {s.value}"]
    if isinstance(s, Return):
        if not s.values:
            return [ind + "return"]
        return [f"{ind}return {', '.join(s.values)}"]
    if isinstance(s, If):
        head = f"{s.init}; {s.cond}" if s.init else s.cond
        lines = [f"{ind}if {head} {{"]
        lines.extend(_block(s.body, depth=depth + 1))
        if s.orelse:
            lines.append(ind + "} else {")
            lines.extend(_block(s.orelse, depth=depth + 1))
        lines.append(ind + "}")
        return lines
    raise TypeError(f"unexpected statement {s!r}")
