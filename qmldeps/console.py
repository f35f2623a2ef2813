"""Shared Rich console instances for CLI output."""

from rich.console import Console

console = Console()
# Diagnostics go to stderr so `--json` output stays machine readable
err_console = Console(stderr=True)

__all__ = ["console", "err_console"]
