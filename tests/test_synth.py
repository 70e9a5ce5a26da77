from __future__ import annotations

from gomockgen.descriptor import InterfaceDescriptor, MethodDescriptor, ParamDescriptor
from gomockgen.gotypes import (
    Builtin,
    Chan,
    ChanDir,
    Func,
    Interface,
    Map,
    Named,
    Pointer,
    Slice,
    Variadic,
)
from gomockgen.params import GeneratorParams
from gomockgen.render import ImportSet
from gomockgen.synth import synthesize_method, synthesize_struct
from gomockgen.unit import (
    Assign,
    ExprStmt,
    Field,
    If,
    MethodDecl,
    Return,
    ShortVarDecl,
    TypeDecl,
    VarDecl,
)

PKG = "example.com/svc"
PARAMS = GeneratorParams(
    interface_name="Svc",
    source_package_path=PKG,
    target_package_path=PKG,
)
STRING = Builtin("string")


def _p(name: str, t) -> ParamDescriptor:
    return ParamDescriptor(name=name, type=t)


def _method(results, params=(_p("id", STRING),), name="Get") -> MethodDecl:
    m = MethodDescriptor(name=name, params=tuple(params), results=tuple(results))
    return synthesize_method(PARAMS, "Svc", "SvcMock", m)


def _result_ifs(decl: MethodDecl) -> list[If]:
    return [s for s in decl.body if isinstance(s, If)]


def test_method_signature_and_doc():
    decl = _method([_p("", STRING)], params=[_p("a", STRING), _p("b", STRING)], name="Concat")
    assert decl.doc == "Concat provides a mock function for method Concat of interface Svc."
    assert decl.receiver == Field(name="_m", type="*SvcMock")
    assert decl.params == (Field("a", "string"), Field("b", "string"))
    assert decl.results == (Field("", "string"),)


def test_call_is_recorded_before_any_extraction():
    decl = _method([_p("", STRING), _p("", Builtin("error"))], params=[_p("a", STRING), _p("b", Builtin("int"))])
    assert decl.body[0] == ShortVarDecl(names=("ret",), value="_m.Called(a, b)")
    first_if = next(i for i, s in enumerate(decl.body) if isinstance(s, If))
    assert first_if > 0


def test_override_check_precedes_every_result():
    decl = _method(
        [_p("", STRING), _p("", Pointer(Named(PKG, "Entry"))), _p("", Builtin("error"))],
    )
    ifs = _result_ifs(decl)
    assert [i.init for i in ifs] == [
        "rf, ok := ret.Get(0).(func(string) string)",
        "rf, ok := ret.Get(1).(func(string) *Entry)",
        "rf, ok := ret.Get(2).(func(string) error)",
    ]
    assert all(i.cond == "ok" for i in ifs)
    assert [i.body for i in ifs] == [
        (Assign("r0", "rf(id)"),),
        (Assign("r1", "rf(id)"),),
        (Assign("r2", "rf(id)"),),
    ]
    assert decl.body[-1] == Return(values=("r0", "r1", "r2"))


def test_error_result_reads_error_slot():
    (check,) = _result_ifs(_method([_p("", Builtin("error"))]))
    assert check.orelse == (Assign("r0", "ret.Error(0)"),)


def test_nillable_results_are_guarded():
    for t, rendered in [
        (Pointer(Named(PKG, "Entry")), "*Entry"),
        (Slice(STRING), "[]string"),
        (Map(STRING, Builtin("int")), "map[string]int"),
        (Chan(ChanDir.RECV, Builtin("int")), "<-chan int"),
        (Interface(), "interface{}"),
        (Func(params=(STRING,)), "func(string)"),
    ]:
        (check,) = _result_ifs(_method([_p("", t)]))
        (guard,) = check.orelse
        assert isinstance(guard, If)
        assert guard.cond == "ret.Get(0) != nil"
        assert guard.body == (Assign("r0", f"ret.Get(0).({rendered})"),)


def test_value_result_is_asserted_unconditionally():
    (check,) = _result_ifs(_method([_p("", Named("time", "Duration"))]))
    assert check.orelse == (Assign("r0", "ret.Get(0).(time.Duration)"),)


def test_result_variables_are_declared_with_rendered_type():
    decl = _method([_p("", Named("time", "Time"))])
    assert VarDecl(name="r0", type="time.Time") in decl.body


def test_named_results_are_preserved_and_gaps_blanked():
    decl = _method([_p("n", Builtin("int")), _p("", Builtin("error"))])
    assert decl.results == (Field("n", "int"), Field("_", "error"))
    # Extraction still uses positional variables.
    assert decl.body[-1] == Return(values=("r0", "r1"))


def test_unnamed_params_get_positional_names():
    decl = _method([], params=[_p("", STRING), _p("_", Builtin("int")), _p("a0", STRING)])
    assert [f.name for f in decl.params] == ["a0_", "a1", "a0"]
    assert decl.body == (ExprStmt("_m.Called(a0_, a1, a0)"),)

    decl = _method([_p("a0", Builtin("int"))], params=[_p("", STRING)], name="F")
    assert [f.name for f in decl.params] == ["a0_"]
    assert decl.results == (Field(name="a0", type="int"),)
    assert decl.body[0] == ShortVarDecl(names=("ret",), value="_m.Called(a0_)")
    assert {f.name for f in decl.params}.isdisjoint(f.name for f in decl.results)


def test_method_without_results_has_no_return():
    decl = _method([], params=[_p("msg", STRING)], name="Log")
    assert decl.results == ()
    assert decl.body == (ExprStmt("_m.Called(msg)"),)


def test_variadic_param_is_forwarded_with_ellipsis():
    decl = _method([_p("", Builtin("int"))], params=[_p("sep", STRING), _p("parts", Variadic(STRING))])
    assert decl.params[1] == Field("parts", "...string")
    assert decl.body[0] == ShortVarDecl(names=("ret",), value="_m.Called(sep, parts)")
    (check,) = _result_ifs(decl)
    assert check.init == "rf, ok := ret.Get(0).(func(string, ...string) int)"
    assert check.body == (Assign("r0", "rf(sep, parts...)"),)


def test_internal_names_do_not_collide_with_params():
    decl = _method([_p("", STRING)], params=[_p("ret", STRING), _p("rf", STRING), _p("r0", STRING)])
    assert decl.body[0] == ShortVarDecl(names=("ret_",), value="_m.Called(ret, rf, r0)")
    (check,) = _result_ifs(decl)
    assert check.init == "rf_, ok := ret_.Get(0).(func(string, string, string) string)"
    assert check.body == (Assign("r0_", "rf_(ret, rf, r0)"),)


def test_foreign_types_are_qualified_through_import_set():
    params = GeneratorParams(interface_name="Svc", source_package_path=PKG, target_package_path=PKG + "/mocks")
    imports = ImportSet()
    m = MethodDescriptor(
        name="Find",
        params=(_p("ctx", Named("context", "Context")),),
        results=(_p("", Pointer(Named("", "Entry"))),),
    )
    decl = synthesize_method(params, "Svc", "SvcMock", m, imports=imports)
    assert decl.params == (Field("ctx", "context.Context"),)
    assert decl.results == (Field("", "*svc.Entry"),)
    assert [i.path for i in imports.imports()] == ["context", PKG]


def test_struct_embeds_recorder_and_keeps_method_order():
    iface = InterfaceDescriptor(
        name="Svc",
        methods=(
            MethodDescriptor(name="Zeta"),
            MethodDescriptor(name="Alpha"),
            MethodDescriptor(name="Zeta"),
        ),
    )
    decls = synthesize_struct(PARAMS, iface, "SvcMock")
    type_decl = decls[0]
    assert type_decl == TypeDecl(
        name="SvcMock",
        doc="SvcMock is an autogenerated mock type for the Svc interface.",
        embeds=("mock.Mock",),
    )
    assert [d.name for d in decls[1:]] == ["Zeta", "Alpha", "Zeta"]


def test_struct_for_empty_interface_has_no_methods():
    decls = synthesize_struct(PARAMS, InterfaceDescriptor(name="Empty"), "EmptyMock")
    assert len(decls) == 1
    assert isinstance(decls[0], TypeDecl)
