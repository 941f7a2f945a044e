"""Doctor command for project diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.file_manager import DiskFileManager
from adapters.maven_project import MavenProjectOperations, ModulePathResolver
from cli.ui_components import print_banner
from core import web_xml
from core.config import AddonSettings
from core.domain.models import AddonConfiguration
from core.domain.paths import LogicalPath
from core.errors import AddonError
from core.resources_loader import load_addon_configuration
from core.services.descriptor_mutator import WEB_XML
from core.xml_utils import read_xml

app = typer.Typer(no_args_is_help=True, help="Project diagnostics.")

_console = Console()


def _status(ok: bool, missing: str = "MISSING") -> str:
    return "OK" if ok else missing


def _check_web_xml(
    table: Table,
    project: MavenProjectOperations,
    files: DiskFileManager,
    settings: AddonSettings,
) -> None:
    path = ModulePathResolver(project.module_root).focused_identifier(LogicalPath.SRC_MAIN_WEBAPP, WEB_XML)
    if not files.exists(path):
        table.add_row("web.xml", "MISSING", str(path))
        return
    try:
        root = read_xml(files.read_bytes(path), source=str(path)).getroot()
    except AddonError as exc:
        table.add_row("web.xml", "FAIL", str(exc))
        return

    version = root.get("version") or "(none)"
    table.add_row("web.xml version", _status(version == settings.servlet_version, "OLD"), version)

    servlet = web_xml.find_servlet(root, settings.servlet_class)
    table.add_row(
        "CometD servlet",
        _status(servlet is not None and web_xml.find_servlet_mapping(root, settings.servlet_name) is not None),
        settings.servlet_class,
    )
    filter_ = web_xml.find_filter(root, settings.filter_class)
    table.add_row(
        "CORS filter",
        _status(filter_ is not None and web_xml.find_filter_mapping(root, settings.filter_name) is not None),
        settings.filter_class,
    )


def _check_build(table: Table, project: MavenProjectOperations, config: AddonConfiguration) -> None:
    registered = project.get_dependencies()
    for dependency in config.dependencies:
        current = next((d for d in registered if d.key == dependency.key), None)
        if current is None:
            table.add_row("dependency", "MISSING", dependency.coordinates)
        else:
            status = _status(current.version == dependency.version, "VERSION")
            table.add_row("dependency", status, current.coordinates)

    plugins = project.get_build_plugins()
    for plugin in config.plugins:
        current = [p for p in plugins if p.key == plugin.key]
        if not current:
            table.add_row("build plugin", "MISSING", plugin.coordinates)
        elif len(current) > 1:
            table.add_row("build plugin", "DUPLICATE", ", ".join(p.coordinates for p in current))
        else:
            table.add_row("build plugin", _status(current[0] == plugin, "VERSION"), current[0].coordinates)


@app.command()
def run(ctx: typer.Context) -> None:
    """Show what `cometd setup` would change in the focused module."""

    state = ctx.obj
    settings = state.settings
    files = DiskFileManager()
    project = MavenProjectOperations(state.project, file_manager=files, module=state.module)

    print_banner(_console)

    table = Table(title="roo-cometd doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if not project.is_focused_project_available():
        table.add_row("pom.xml", "MISSING", str(project.pom_path))
        _console.print(table)
        raise typer.Exit(code=1)
    table.add_row("pom.xml", "OK", str(project.pom_path))

    try:
        config = load_addon_configuration(settings.configuration_path)
    except AddonError as exc:
        table.add_row("configuration", "FAIL", str(exc))
        _console.print(table)
        raise typer.Exit(code=1) from exc

    _check_web_xml(table, project, files, settings)
    try:
        _check_build(table, project, config)
    except AddonError as exc:
        table.add_row("pom.xml", "FAIL", str(exc))

    _console.print(table)
