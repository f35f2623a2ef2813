"""qmldeps CLI - find the QML modules a Qt project needs to ship."""

import json
import logging
import os
import sys
from pathlib import Path

import click
from rich.logging import RichHandler
from rich.table import Table

from .console import console
from .console import err_console
from .deploy import DebugFileFilter
from .deploy import collect_deploy_files
from .logging_setup import ENV_LOG_PATH
from .logging_setup import init_json_logging
from .module_resolution import QmlImportScanner
from .module_resolution import ScanError
from .module_resolution import ScanResult
from .module_resolution import extract_imports_from_file
from .module_resolution import extract_imports_from_qmldir
from .module_resolution import scan_qml_tree
from .module_resolution.scanners import QMLDIR_FILE_NAME
from .settings import ScanSettings
from .settings import SettingsError
from .settings import SettingsManager
from .ui import display_scan_error
from .ui import display_settings_error

logger = logging.getLogger(__name__)

QT_VERSION_CHOICE = click.Choice(["5", "6"])


def _qml_root_option(func):
    return click.option(
        "--qml-root",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Qt qml/ directory (overrides settings and environment)",
    )(func)


def _qt_option(func):
    return click.option("--qt", "qt", type=QT_VERSION_CHOICE, default=None, help="Qt major version")(func)


def _scan_options(func):
    func = click.option(
        "--recursive/--no-recursive",
        default=None,
        help="Walk project subdirectories (default: from settings, on)",
    )(func)
    func = _qt_option(func)
    func = _qml_root_option(func)
    return click.argument("project_dir", type=click.Path(path_type=Path))(func)


def _load_settings(require_qml_root: bool = True, **overrides) -> ScanSettings:
    """Resolve settings or exit with a configuration error panel."""
    if overrides.get("qt_version") is not None:
        overrides["qt_version"] = int(overrides["qt_version"])
    try:
        settings = SettingsManager().get_scan_settings(**overrides)
        if require_qml_root:
            settings.require_qml_root()
    except SettingsError as e:
        display_settings_error(err_console, e)
        sys.exit(1)
    return settings


def _run_scan(settings: ScanSettings, project_dir: Path) -> ScanResult:
    """Run a scan or exit with a scan error panel."""
    scanner = QmlImportScanner(
        settings.require_qml_root(),
        settings.qt_major_version,
        max_depth=settings.max_depth,
    )
    try:
        return scanner.scan(project_dir.absolute(), recursive=settings.recursive)
    except ScanError as e:
        display_scan_error(err_console, e)
        sys.exit(1)


@click.group()
@click.version_option(package_name="qmldeps")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Write JSONL logs to this file")
@click.option("--verbose", "-v", is_flag=True, help="Print diagnostics to stderr")
def cli(log_file: Path | None, verbose: bool):
    """qmldeps - resolve the QML modules a Qt project imports."""
    if log_file is not None or ENV_LOG_PATH in os.environ:
        init_json_logging(log_file)
    if verbose:
        handler = RichHandler(console=err_console, show_path=False)
        handler.setLevel(logging.DEBUG)
        package_logger = logging.getLogger("qmldeps")
        package_logger.setLevel(logging.DEBUG)
        for h in list(package_logger.handlers):
            if isinstance(h, RichHandler):
                package_logger.removeHandler(h)
        package_logger.addHandler(handler)


@cli.command()
@_scan_options
@click.option("--json", "as_json", is_flag=True, help="Print the scan result as JSON")
@click.option("--show-skipped", is_flag=True, help="List directories that could not be walked")
def scan(
    project_dir: Path,
    qml_root: Path | None,
    qt: str | None,
    recursive: bool | None,
    as_json: bool,
    show_skipped: bool,
):
    """Resolve every QML module directory PROJECT_DIR depends on."""
    settings = _load_settings(qml_root=qml_root, qt_version=qt, recursive=recursive)
    result = _run_scan(settings, project_dir)

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    table = Table(title=f"QML modules for {project_dir}", show_lines=False)
    table.add_column("Import", style="cyan")
    table.add_column("Path")
    for item in result.resolved:
        table.add_row(item.token, str(item.path) if item.path else "[dim]unresolved[/dim]")
    console.print(table)

    console.print(f"[dim]{len(result.imports)} imports, {len(result.paths)} paths[/dim]")
    if result.skipped:
        if show_skipped:
            for skipped in result.skipped:
                console.print(f"[yellow]skipped[/yellow] {skipped.path} [dim]({skipped.reason})[/dim]")
        else:
            console.print(f"[dim]{len(result.skipped)} directories skipped (--show-skipped to list)[/dim]")


@cli.command()
@_scan_options
@click.option("--include-debug", is_flag=True, help="Keep debug artifacts")
def files(project_dir: Path, qml_root: Path | None, qt: str | None, recursive: bool | None, include_debug: bool):
    """List the files that deploying PROJECT_DIR's QML modules would copy."""
    settings = _load_settings(qml_root=qml_root, qt_version=qt, recursive=recursive)
    result = _run_scan(settings, project_dir)

    is_debug_file = None
    if settings.exclude_debug and not include_debug:
        is_debug_file = DebugFileFilter(settings.debug_patterns)

    for path in collect_deploy_files(result.paths, is_debug_file):
        click.echo(str(path))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_qt_option
def imports(file: Path, qt: str | None):
    """Print the import tokens declared by one .qml or qmldir FILE."""
    qt_version = _load_settings(require_qml_root=False, qt_version=qt).qt_major_version
    if file.name == QMLDIR_FILE_NAME:
        tokens = extract_imports_from_qmldir(file, qt_version)
    else:
        tokens = extract_imports_from_file(file, qt_version)

    for token in tokens:
        click.echo(token)


@cli.command(name="version-dirs")
@_qml_root_option
def version_dirs(qml_root: Path | None):
    """Print module directory names that have a .2 variant."""
    settings = _load_settings(qml_root=qml_root)
    try:
        names = scan_qml_tree(settings.require_qml_root())
    except ScanError as e:
        display_scan_error(err_console, e)
        sys.exit(1)

    for name in sorted(names):
        click.echo(name)


def main():
    cli()


if __name__ == "__main__":
    main()
