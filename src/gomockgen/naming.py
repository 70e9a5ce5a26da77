from __future__ import annotations

import re

from .errors import ParameterDecodeError

DEFAULT_MOCK_STRUCT_NAME_TEMPLATE = "%sMock"
DEFAULT_OUT_PATH_TEMPLATE = "./%s_mock.go"

GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer", "else",
        "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
        "map", "package", "range", "return", "select", "struct", "switch", "type", "var",
    }
)

GO_PREDECLARED = frozenset(
    {
        "any", "bool", "byte", "comparable", "complex64", "complex128", "error",
        "float32", "float64", "int", "int8", "int16", "int32", "int64", "rune",
        "string", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
        "true", "false", "iota", "nil", "append", "cap", "clear", "close",
        "complex", "copy", "delete", "imag", "len", "make", "max", "min", "new",
        "panic", "print", "println", "real", "recover",
    }
)

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[\s\-.]+")
_UNDERSCORES = re.compile(r"_+")
_MAJOR_VERSION = re.compile(r"^v[0-9]+$")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_GO_VERB_V = re.compile(r"((?:^|[^%])(?:%%)*)%v")


def snake_case(name: str) -> str:
    """Convert a Go identifier to snake_case, keeping acronyms together.

    StringService -> string_service, HTTPServer -> http_server.
    """
    s = _SEPARATORS.sub("_", name.strip())
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", s)
    s = _WORD_BOUNDARY.sub(r"\1_\2", s)
    return _UNDERSCORES.sub("_", s).strip("_").lower()


def is_go_identifier(name: str) -> bool:
    return name.isidentifier() and name not in GO_KEYWORDS


def apply_template(template: str, value: str, *, field: str) -> str:
    # Go printf templates with exactly one slot; `%v` formats a string like `%s`.
    try:
        return _GO_VERB_V.sub(lambda m: m.group(1) + "%s", template) % (value,)
    except (TypeError, ValueError) as e:
        raise ParameterDecodeError(f"params: invalid {field} {template!r}: {e}") from None


def mock_struct_name(template: str, interface_name: str) -> str:
    name = apply_template(
        template or DEFAULT_MOCK_STRUCT_NAME_TEMPLATE,
        interface_name,
        field="mock_struct_name_template",
    )
    if not is_go_identifier(name):
        raise ParameterDecodeError(f"params: mock struct name {name!r} is not a valid Go identifier")
    return name


def output_path(template: str, interface_name: str) -> str:
    return apply_template(
        template or DEFAULT_OUT_PATH_TEMPLATE,
        snake_case(interface_name),
        field="out_path_template",
    )


def guess_alias(path: str) -> str:
    """Guess the package name Go code would use for an import path.

    The last path element is used, or the one before it when the last is a
    major-version suffix such as `v2`. The result is lower-cased and reduced
    to alphanumerics without leading digits; "pkg" when nothing is left.
    """
    parts = [p for p in path.strip("/").split("/") if p]
    if not parts:
        return "pkg"
    last = parts[-1]
    if _MAJOR_VERSION.match(last) and len(parts) > 1:
        last = parts[-2]
    alias = _NON_ALNUM.sub("", last.lower())
    alias = alias.lstrip("0123456789")
    return alias or "pkg"
