"""Mock generation entry point: descriptor + params -> one Go file."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable

from .descriptor import FileDescriptor, InterfaceDescriptor
from .errors import InterfaceNotFoundError
from .naming import guess_alias, mock_struct_name, output_path
from .params import GeneratorParams, decode_params
from .render import ImportSet
from .synth import body_names, synthesize_struct
from .unit import GenerationUnit

logger = logging.getLogger(__name__)

GENERATOR_NAME = "gomockgen"
GENERATOR_VERSION = "1.0.0"


@dataclass(frozen=True)
class GeneratedFile:
    path: str
    content: bytes


@dataclass(frozen=True)
class GenerateResult:
    files: tuple[GeneratedFile, ...]


def provenance_header() -> tuple[str, ...]:
    return (f"Code generated by {GENERATOR_NAME} {GENERATOR_VERSION}. DO NOT EDIT.",)


def build_unit(params: GeneratorParams, iface: InterfaceDescriptor) -> GenerationUnit:
    """Synthesize the declaration tree for `iface` inside the target package."""
    target = params.target_package_path or params.source_package_path
    if target != params.target_package_path:
        params = dataclasses.replace(params, target_package_path=target)

    # Local names shadow package aliases inside method bodies.
    reserved = {p.name for m in iface.methods for p in (*m.params, *m.results) if p.name}
    reserved |= body_names(iface)
    imports = ImportSet(reserved=reserved)

    name = mock_struct_name(params.mock_struct_name_template, iface.name)
    decls = synthesize_struct(params, iface, name, imports=imports)
    logger.debug("%s imports: %s", name, [i.path for i in imports.imports()])
    return GenerationUnit(
        package_path=target,
        package_name=guess_alias(target) if target else "mocks",
        header=provenance_header(),
        imports=tuple(imports.imports()),
        decls=decls,
    )


class MockGenerator:
    """Generates testify-based mock implementations of Go interfaces.

    `formatter` post-processes the serialized source (for example
    `gomockgen.gofmt.format_source`); it is not applied when omitted.
    """

    def __init__(
        self,
        *,
        logger: logging.Logger | None = None,
        formatter: Callable[[str], str] | None = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.formatter = formatter

    def generate(
        self,
        source: FileDescriptor | InterfaceDescriptor,
        params: GeneratorParams | bytes | str,
    ) -> GenerateResult:
        if not isinstance(params, GeneratorParams):
            params = decode_params(params)

        iface = _find_interface(source, params.interface_name)
        self.logger.debug(
            "generating mock for %s (%d methods) into %s",
            iface.name,
            len(iface.methods),
            params.target_package_path or params.source_package_path or "<local>",
        )

        unit = build_unit(params, iface)
        path = output_path(params.out_path_template, iface.name)
        content = unit.render()
        if self.formatter is not None:
            content = self.formatter(content)

        self.logger.info("generated %s for interface %s", path, iface.name)
        return GenerateResult(files=(GeneratedFile(path=path, content=content.encode("utf-8")),))


def generate(
    source: FileDescriptor | InterfaceDescriptor,
    params: GeneratorParams | bytes | str,
    *,
    formatter: Callable[[str], str] | None = None,
) -> GenerateResult:
    return MockGenerator(formatter=formatter).generate(source, params)


def _find_interface(source: FileDescriptor | InterfaceDescriptor, name: str) -> InterfaceDescriptor:
    if isinstance(source, FileDescriptor):
        return source.find_interface(name)
    if source.name != name:
        raise InterfaceNotFoundError(f"interface {name} not found (got {source.name})")
    return source
