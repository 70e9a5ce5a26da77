"""gomockgen: generate testify mocks for Go interfaces from structural descriptors."""

from __future__ import annotations

from . import errors, gotypes
from .descriptor import FileDescriptor, InterfaceDescriptor, MethodDescriptor, ParamDescriptor
from .generator import GeneratedFile, GenerateResult, MockGenerator, generate
from .params import GeneratorParams, decode_params

__all__ = [
    "FileDescriptor",
    "GenerateResult",
    "GeneratedFile",
    "GeneratorParams",
    "InterfaceDescriptor",
    "MethodDescriptor",
    "MockGenerator",
    "ParamDescriptor",
    "decode_params",
    "errors",
    "generate",
    "gotypes",
]
