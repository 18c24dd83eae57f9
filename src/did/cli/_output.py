"""Output mode and error reporting for did CLI.

Every command prints either human-readable text or JSON documents. JSON is
selected by the global ``--json`` flag or by a command's own ``--json``
option, whichever is given.
"""

from __future__ import annotations

from typing import Any

import orjson
import typer

_mode: dict[str, bool] = {"json": False}


def set_json_flag(value: bool) -> None:
    """Select the output mode for the current invocation."""
    _mode["json"] = value


def is_json_output(local_flag: bool = False) -> bool:
    """Return whether the current invocation writes JSON.

    A command-level ``--json`` switches the rest of the invocation to JSON,
    so an error reported later in the same command is JSON as well.
    """
    if local_flag:
        _mode["json"] = True
    return _mode["json"]


def echo_json(data: Any) -> None:
    """Write a JSON document to stdout."""
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())


def echo_error(message: str) -> None:
    """Report an error on stderr.

    Plain mode writes ``Error: <message>``; JSON mode writes
    ``{"error": "<message>"}``.
    """
    if _mode["json"]:
        typer.echo(orjson.dumps({"error": message}).decode(), err=True)
    else:
        typer.echo(f"Error: {message}", err=True)
