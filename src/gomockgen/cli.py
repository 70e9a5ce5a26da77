from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from pathlib import Path

from .errors import DescriptorDecodeError, GenerateError, ParameterDecodeError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="gomockgen")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for stderr diagnostics (default: WARNING).",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print gomockgen version.")

    p_gen = sub.add_parser("gen", help="Generate a testify mock for one interface.")
    p_gen.add_argument(
        "--descriptor",
        required=True,
        help="Path to the parsed source file descriptor (JSON).",
    )
    p_params = p_gen.add_mutually_exclusive_group(required=True)
    p_params.add_argument("--params", default=None, help="Generator params as a JSON object.")
    p_params.add_argument("--params-file", default=None, help="Path to a JSON file with generator params.")
    p_gen.add_argument(
        "--out-root",
        default=".",
        help="Directory that relative output paths are resolved against (default: cwd).",
    )
    p_gen.add_argument("--gofmt", action="store_true", help="Format the output with gofmt.")
    p_gen.add_argument("--stdout", action="store_true", help="Print the generated file instead of writing it.")

    sub.add_parser(
        "rpc",
        help="Read one MessagePack generate request from stdin and write the response to stdout.",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "version":
        try:
            print(importlib.metadata.version("gomockgen"))
        except Exception:
            # Best-effort fallback for editable/local-only contexts.
            from .generator import GENERATOR_VERSION

            print(GENERATOR_VERSION)
        return

    if args.cmd == "gen":
        from .descriptor import FileDescriptor
        from .generator import MockGenerator

        formatter = None
        if args.gofmt:
            from .gofmt import format_source

            formatter = format_source

        try:
            file = FileDescriptor.from_dict(_read_json(Path(args.descriptor)))
            if args.params_file is not None:
                params = _read_params(Path(args.params_file))
            else:
                params = args.params.encode("utf-8")
            result = MockGenerator(formatter=formatter).generate(file, params)
        except GenerateError as e:
            raise SystemExit(str(e)) from None

        for f in result.files:
            if args.stdout:
                sys.stdout.write(f.content.decode("utf-8"))
                continue
            out = Path(f.path)
            if not out.is_absolute():
                out = Path(args.out_root) / out
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_bytes(f.content)
            print(str(out))
        return

    if args.cmd == "rpc":
        from .abi import handle_request

        payload = sys.stdin.buffer.read()
        sys.stdout.buffer.write(handle_request(payload))
        sys.stdout.buffer.flush()
        return


def _read_json(path: Path):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise DescriptorDecodeError(f"cannot read descriptor {path}: {e}") from e
    except ValueError as e:
        raise DescriptorDecodeError(f"failed to parse descriptor {path}: {e}") from e


def _read_params(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise ParameterDecodeError(f"cannot read params {path}: {e}") from e
