"""MessagePack envelope for host <-> plugin generate calls (v0).

Transport framing and the plugin handshake live in the host; this module
only encodes and decodes single request/response payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import msgpack

from .descriptor import FileDescriptor
from .errors import ABIDecodeError, GenerateError
from .generator import GeneratedFile, GenerateResult, MockGenerator

ABI_VERSION = 0


@dataclass(frozen=True)
class ABIError:
    type: str
    message: str


@dataclass(frozen=True)
class ABIResponse:
    ok: bool
    result: GenerateResult | None = None
    error: ABIError | None = None


@dataclass(frozen=True)
class GenerateRequest:
    file: FileDescriptor
    params: bytes


def encode_generate_request(*, file: dict[str, Any], params: bytes | str) -> bytes:
    if isinstance(params, str):
        params = params.encode("utf-8")
    payload = {
        "abi": ABI_VERSION,
        "op": "generate",
        "file": file,
        "params": params,
    }
    return msgpack.packb(payload, use_bin_type=True)


def decode_generate_request(payload: bytes) -> GenerateRequest:
    obj = _unpack(payload)
    if not isinstance(obj, dict):
        raise ABIDecodeError("invalid request envelope")
    if obj.get("abi") != ABI_VERSION:
        raise ABIDecodeError(f"unsupported abi version: {obj.get('abi')!r}")
    if obj.get("op") != "generate":
        raise ABIDecodeError(f"unsupported op: {obj.get('op')!r}")

    params = obj.get("params")
    if isinstance(params, str):
        params = params.encode("utf-8")
    if not isinstance(params, bytes):
        raise ABIDecodeError("request params must be bytes")
    return GenerateRequest(file=FileDescriptor.from_dict(obj.get("file")), params=params)


def encode_ok_response(result: GenerateResult) -> bytes:
    payload = {
        "ok": True,
        "result": {"files": [{"path": f.path, "content": f.content} for f in result.files]},
    }
    return msgpack.packb(payload, use_bin_type=True)


def encode_error_response(err: Exception) -> bytes:
    payload = {
        "ok": False,
        "error": {"type": type(err).__name__, "message": str(err)},
    }
    return msgpack.packb(payload, use_bin_type=True)


def decode_response(payload: bytes) -> ABIResponse:
    obj = _unpack(payload)
    if not isinstance(obj, dict) or "ok" not in obj:
        raise ABIDecodeError("invalid response envelope")

    if bool(obj.get("ok")):
        result = obj.get("result")
        if not isinstance(result, dict) or not isinstance(result.get("files"), list):
            raise ABIDecodeError("invalid result envelope")
        files: list[GeneratedFile] = []
        for f in result["files"]:
            if not isinstance(f, dict):
                raise ABIDecodeError("invalid file entry")
            path = f.get("path")
            content = f.get("content")
            if not isinstance(path, str) or not isinstance(content, bytes):
                raise ABIDecodeError("invalid file entry")
            files.append(GeneratedFile(path=path, content=content))
        return ABIResponse(ok=True, result=GenerateResult(files=tuple(files)))

    err = obj.get("error")
    if not isinstance(err, dict):
        raise ABIDecodeError("invalid error envelope")
    return ABIResponse(
        ok=False,
        error=ABIError(type=str(err.get("type", "")), message=str(err.get("message", ""))),
    )


def handle_request(payload: bytes, *, generator: MockGenerator | None = None) -> bytes:
    """Serve one generate request.

    Caller-reportable errors become an error envelope. MalformedTypeGraphError
    is not caught.
    """
    generator = generator or MockGenerator()
    try:
        req = decode_generate_request(payload)
        result = generator.generate(req.file, req.params)
    except GenerateError as e:
        generator.logger.warning("generate request failed: %s", e)
        return encode_error_response(e)
    return encode_ok_response(result)


def _unpack(payload: bytes) -> Any:
    try:
        return msgpack.unpackb(payload, raw=False)
    except Exception as e:  # noqa: BLE001 - boundary decoding error
        raise ABIDecodeError(str(e)) from e
