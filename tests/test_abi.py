from __future__ import annotations

import json

import msgpack
import pytest

from gomockgen import abi
from gomockgen.errors import ABIDecodeError, MalformedTypeGraphError

FILE = {
    "package": "example.com/svc",
    "interfaces": [
        {
            "name": "Pinger",
            "methods": [
                {"name": "Ping", "params": [], "results": [{"name": "", "type": {"kind": "builtin", "name": "error"}}]}
            ],
        }
    ],
}
PARAMS = json.dumps(
    {
        "interface_name": "Pinger",
        "out_path_template": "%s_mock.go",
        "source_package_path": "example.com/svc",
        "target_package_path": "example.com/svc",
    }
)


def test_encode_generate_request_envelope():
    req = abi.encode_generate_request(file=FILE, params=PARAMS)
    decoded = msgpack.unpackb(req, raw=False)
    assert decoded["abi"] == 0
    assert decoded["op"] == "generate"
    assert decoded["file"] == FILE
    assert decoded["params"] == PARAMS.encode("utf-8")


def test_handle_request_ok():
    out = abi.handle_request(abi.encode_generate_request(file=FILE, params=PARAMS))
    resp = abi.decode_response(out)
    assert resp.ok is True
    assert resp.error is None
    assert resp.result is not None
    (f,) = resp.result.files
    assert f.path == "pinger_mock.go"
    assert b"func (_m *PingerMock) Ping() error {" in f.content
    assert b"r0 = ret.Error(0)" in f.content


def test_handle_request_reports_missing_interface():
    params = json.dumps({"interface_name": "Nope"})
    resp = abi.decode_response(abi.handle_request(abi.encode_generate_request(file=FILE, params=params)))
    assert resp.ok is False
    assert resp.result is None
    assert resp.error is not None
    assert resp.error.type == "InterfaceNotFoundError"
    assert "Nope" in resp.error.message


def test_handle_request_reports_param_decode_error_verbatim():
    resp = abi.decode_response(abi.handle_request(abi.encode_generate_request(file=FILE, params=b"{oops")))
    assert resp.ok is False
    assert resp.error is not None
    assert resp.error.type == "ParameterDecodeError"
    assert resp.error.message.startswith("Expecting property name")


@pytest.mark.parametrize(
    "payload",
    [
        b"\xc1",
        msgpack.packb([1, 2, 3]),
        msgpack.packb({"abi": 1, "op": "generate", "file": FILE, "params": b"{}"}),
        msgpack.packb({"abi": 0, "op": "describe", "file": FILE, "params": b"{}"}),
        msgpack.packb({"abi": 0, "op": "generate", "file": FILE, "params": 7}),
    ],
)
def test_handle_request_rejects_bad_envelopes(payload: bytes):
    resp = abi.decode_response(abi.handle_request(payload))
    assert resp.ok is False
    assert resp.error is not None
    assert resp.error.type == "ABIDecodeError"


def test_malformed_type_graph_is_not_swallowed():
    bad = {
        "package": "example.com/svc",
        "interfaces": [
            {"name": "Pinger", "methods": [{"name": "Ping", "results": [{"type": {"kind": "tuple"}}]}]}
        ],
    }
    with pytest.raises(MalformedTypeGraphError):
        abi.handle_request(abi.encode_generate_request(file=bad, params=PARAMS))


def test_decode_response_rejects_invalid_envelopes():
    with pytest.raises(ABIDecodeError):
        abi.decode_response(msgpack.packb({"result": {}}))
    with pytest.raises(ABIDecodeError):
        abi.decode_response(msgpack.packb({"ok": True, "result": {"files": [{"path": 1}]}}))
    with pytest.raises(ABIDecodeError):
        abi.decode_response(msgpack.packb({"ok": False, "error": "boom"}))
