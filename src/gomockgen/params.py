"""Generator parameters and their JSON blob decoding."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .errors import ParameterDecodeError


@dataclass(frozen=True)
class GeneratorParams:
    # Name of the interface to mock. Example: StringService
    interface_name: str
    # Output path template; `%s` receives the snake_case interface name.
    # Example: ./generated/%s_mock.go
    out_path_template: str = ""
    # Import path of the package declaring the interface.
    source_package_path: str = ""
    # Import path of the package the mock is generated into.
    target_package_path: str = ""
    # Mock struct name template; `%s` receives the interface name.
    # Empty means "%sMock".
    mock_struct_name_template: str = ""


_FIELDS = (
    "interface_name",
    "out_path_template",
    "source_package_path",
    "target_package_path",
    "mock_struct_name_template",
)


def decode_params(blob: bytes | str) -> GeneratorParams:
    """Decode the JSON parameter blob sent by the host.

    Unknown keys are ignored. Missing keys take their empty defaults;
    `interface_name` is required.
    """
    try:
        obj: Any = json.loads(blob)
    except (ValueError, UnicodeDecodeError) as e:
        raise ParameterDecodeError(str(e)) from e

    if not isinstance(obj, dict):
        raise ParameterDecodeError("params: expected JSON object")

    values: dict[str, str] = {}
    for key in _FIELDS:
        v = obj.get(key, "")
        if v is None:
            v = ""
        if not isinstance(v, str):
            raise ParameterDecodeError(f"params: {key} must be a string")
        values[key] = v

    if not values["interface_name"]:
        raise ParameterDecodeError("params: interface_name is required")
    return GeneratorParams(**values)
