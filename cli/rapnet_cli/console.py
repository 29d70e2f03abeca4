from __future__ import annotations

import sys
from typing import Any

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def print_json(data) -> None:
    console.print_json(data=data)


def print_payload(data: Any) -> None:
    """JSON is pretty-printed, text (CSV, XML) goes out as-is, binary (DBF) is written raw."""
    if isinstance(data, (dict, list)):
        print_json(data)
    elif data is None:
        info("Empty response.")
    elif isinstance(data, bytes):
        _write_binary(data)
    else:
        console.print(str(data), markup=False, highlight=False, soft_wrap=True)


def info(msg: str) -> None:
    console.print(f"[bold cyan]•[/] {escape(msg)}")


def ok(msg: str) -> None:
    console.print(f"[bold green]OK[/] {msg}")


def warn(msg: str) -> None:
    err_console.print(f"[bold yellow]WARN[/] {msg}")


def err(msg: str) -> None:
    err_console.print(f"[bold red]ERR[/] {escape(msg)}")


def _write_binary(data: bytes) -> None:
    out = sys.stdout
    if out.isatty():
        warn(f"Binary response ({len(data)} bytes) not shown. Redirect output to a file, e.g. > prices.dbf")
        return
    out.flush()
    out.buffer.write(data)
    out.buffer.flush()
