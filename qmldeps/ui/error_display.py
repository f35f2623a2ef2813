"""Error panels for fatal scan and settings failures."""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..module_resolution import ProjectDirNotReadableError
from ..module_resolution import QmlRootNotReadableError
from ..module_resolution import ScanError
from ..settings import SettingsError

_HINTS = {
    QmlRootNotReadableError: "Check --qml-root points at the qml/ directory of your Qt installation.",
    ProjectDirNotReadableError: "Check the project directory exists and is readable.",
}


def display_scan_error(console: Console, error: ScanError) -> None:
    """Render a fatal scan failure with a fix-it hint."""
    body = Text()
    body.append(error.message, style="bold")
    body.append("\n\n")
    body.append(f"Path: {error.path}", style="dim")
    if hint := _HINTS.get(type(error)):
        body.append("\n")
        body.append(hint, style="yellow")

    console.print(Panel(body, title="[red]Scan failed[/red]", border_style="red", expand=False))


def display_settings_error(console: Console, error: SettingsError) -> None:
    """Render a configuration problem."""
    console.print(
        Panel(Text(str(error)), title="[red]Configuration error[/red]", border_style="red", expand=False)
    )
