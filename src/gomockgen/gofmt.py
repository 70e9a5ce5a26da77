from __future__ import annotations

import os
import subprocess

from .errors import FormatError


def gofmt_command() -> list[str]:
    """Return the formatter command. Override the binary with `GOMOCKGEN_GOFMT`."""
    return [os.environ.get("GOMOCKGEN_GOFMT") or "gofmt"]


def format_source(src: str) -> str:
    """Pipe Go source through gofmt and return the canonical text."""
    cmd = gofmt_command()
    try:
        proc = subprocess.run(
            cmd,
            input=src.encode("utf-8"),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except FileNotFoundError as e:
        raise FormatError(
            f"gofmt not found (`{cmd[0]}` is missing from PATH). "
            "Install Go or set GOMOCKGEN_GOFMT to the gofmt binary."
        ) from e

    if proc.returncode != 0:
        stderr = (proc.stderr or b"").decode("utf-8", errors="replace")
        raise FormatError(f"gofmt failed\n{stderr}")
    return (proc.stdout or b"").decode("utf-8")
