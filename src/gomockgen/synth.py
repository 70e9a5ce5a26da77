"""Synthesis of the mock struct and its methods."""

from __future__ import annotations

from .classify import ResultKind, classify_result
from .descriptor import InterfaceDescriptor, MethodDescriptor, ParamDescriptor
from .gotypes import Func, TypeDescriptor, Variadic
from .params import GeneratorParams
from .render import ImportSet, render_type
from .unit import (
    Assign,
    Blank,
    Decl,
    ExprStmt,
    Field,
    If,
    MethodDecl,
    Return,
    ShortVarDecl,
    Stmt,
    TypeDecl,
    VarDecl,
)

MOCK_PACKAGE = "github.com/stretchr/testify/mock"


def body_names(iface: InterfaceDescriptor) -> set[str]:
    """Identifiers that method bodies may declare, before collision renaming."""
    names = {"_m", "ret", "rf", "ok"}
    for m in iface.methods:
        names.update(f"r{i}" for i in range(len(m.results)))
        names.update(f"a{i}" for i in range(len(m.params)))
    return names


def synthesize_struct(
    params: GeneratorParams,
    iface: InterfaceDescriptor,
    mock_struct_name: str,
    *,
    imports: ImportSet | None = None,
) -> tuple[Decl, ...]:
    """Return the mock struct declaration followed by one method per interface method.

    Example output:

        // StringServiceMock is an autogenerated mock type for the StringService interface.
        type StringServiceMock struct {
            mock.Mock
        }
    """
    imports = imports if imports is not None else ImportSet()
    type_decl = TypeDecl(
        name=mock_struct_name,
        doc=f"{mock_struct_name} is an autogenerated mock type for the {iface.name} interface.",
        embeds=(f"{imports.alias(MOCK_PACKAGE)}.Mock",),
    )
    methods = [
        synthesize_method(params, iface.name, mock_struct_name, m, imports=imports)
        for m in iface.methods
    ]
    return (type_decl, *methods)


def synthesize_method(
    params: GeneratorParams,
    interface_name: str,
    mock_struct_name: str,
    method: MethodDescriptor,
    *,
    imports: ImportSet | None = None,
) -> MethodDecl:
    """Build one mock method.

    Example output for `Concat(a string, b string) string`:

        // Concat provides a mock function for method Concat of interface StringService.
        func (_m *StringServiceMock) Concat(a string, b string) string {
            ret := _m.Called(a, b)

            var r0 string
            if rf, ok := ret.Get(0).(func(string, string) string); ok {
                r0 = rf(a, b)
            } else {
                r0 = ret.Get(0).(string)
            }

            return r0
        }
    """
    imports = imports if imports is not None else ImportSet()

    def typ(t: TypeDescriptor) -> str:
        return render_type(
            t,
            source_pkg=params.source_package_path,
            target_pkg=params.target_package_path,
            imports=imports,
        )

    arg_names = _arg_names(method.params, reserved={r.name for r in method.results if r.name})
    taken = set(arg_names) | {r.name for r in method.results if r.name}
    recv = _fresh("_m", taken)
    ret = _fresh("ret", taken)
    rf = _fresh("rf", taken)
    ok = _fresh("ok", taken)
    result_vars = [_fresh(f"r{i}", taken) for i in range(len(method.results))]

    recorded = f"{recv}.Called({', '.join(arg_names)})"
    forwarded = ", ".join(_forward(n, p) for n, p in zip(arg_names, method.params, strict=True))
    param_types = tuple(p.type for p in method.params)

    body: list[Stmt] = []
    if method.results:
        body.append(ShortVarDecl(names=(ret,), value=recorded))
        body.append(Blank())
    else:
        body.append(ExprStmt(recorded))

    for i, (var, r) in enumerate(zip(result_vars, method.results, strict=True)):
        rt = typ(r.type)
        override = typ(Func(params=param_types, results=(r.type,)))
        body.append(VarDecl(name=var, type=rt))
        body.append(
            If(
                init=f"{rf}, {ok} := {ret}.Get({i}).({override})",
                cond=ok,
                body=(Assign(target=var, value=f"{rf}({forwarded})"),),
                orelse=_extract(classify_result(r.type), index=i, var=var, type_expr=rt, ret=ret),
            )
        )
        body.append(Blank())

    if method.results:
        body.append(Return(values=tuple(result_vars)))

    return MethodDecl(
        doc=f"{method.name} provides a mock function for method {method.name} of interface {interface_name}.",
        receiver=Field(name=recv, type=f"*{mock_struct_name}"),
        name=method.name,
        params=tuple(Field(name=n, type=typ(p.type)) for n, p in zip(arg_names, method.params, strict=True)),
        results=_result_fields(method.results, typ),
        body=tuple(body),
    )


def _extract(kind: ResultKind, *, index: int, var: str, type_expr: str, ret: str) -> tuple[Stmt, ...]:
    get = f"{ret}.Get({index})"
    if kind is ResultKind.ERROR:
        return (Assign(target=var, value=f"{ret}.Error({index})"),)
    if kind is ResultKind.NILLABLE:
        return (If(cond=f"{get} != nil", body=(Assign(target=var, value=f"{get}.({type_expr})"),)),)
    if kind is ResultKind.VALUE:
        return (Assign(target=var, value=f"{get}.({type_expr})"),)
    raise ValueError(f"unknown result kind {kind!r}")


def _arg_names(params: tuple[ParamDescriptor, ...], *, reserved: set[str]) -> list[str]:
    # Unnamed and blank parameters still have to be passed to Called().
    names: list[str] = []
    taken = {p.name for p in params if p.name and p.name != "_"} | reserved
    for i, p in enumerate(params):
        if p.name and p.name != "_":
            names.append(p.name)
        else:
            names.append(_fresh(f"a{i}", taken))
    return names


def _result_fields(results: tuple[ParamDescriptor, ...], typ) -> tuple[Field, ...]:
    # Go requires all results named or none; fill gaps with the blank identifier.
    named = any(r.name for r in results)
    return tuple(Field(name=(r.name or "_") if named else "", type=typ(r.type)) for r in results)


def _forward(name: str, p: ParamDescriptor) -> str:
    return f"{name}..." if isinstance(p.type, Variadic) else name


def _fresh(name: str, taken: set[str]) -> str:
    while name in taken:
        name += "_"
    taken.add(name)
    return name
