"""CLI (Typer).

Comandos:
- `cometd setup` / `cometd remove`: servlet + filtro en web.xml y
  dependencias/plugins en el pom del módulo enfocado.
- `cometd annotate TYPE` / `cometd annotate-all`: marker del add-on.
- `doctor run`: diagnóstico del proyecto.

La CLI solo presenta; toda la lógica vive en `core.services`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape

from cli import doctor
from cli.ui_components import build_annotated_table, build_report_table
from core.config import AddonSettings
from core.domain.models import JavaType
from core.errors import AddonError
from core.logging_config import setup_logging
from core.services.cometd_operations import CometdOperations, build_operations

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="CometD add-on for Maven web projects.")
cometd_app = typer.Typer(no_args_is_help=True, help="Wire CometD into the focused web module.")
app.add_typer(cometd_app, name="cometd")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@dataclass
class CliState:
    settings: AddonSettings
    project: Path
    module: str | None = None

    def operations(self) -> CometdOperations:
        return build_operations(self.settings, self.project, module=self.module)


@app.callback()
def main(
    ctx: typer.Context,
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        file_okay=False,
        resolve_path=True,
        help="Project root (directory holding pom.xml).",
    ),
    module: str | None = typer.Option(
        None,
        "--module",
        "-m",
        help="Focused module, relative to the project root.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    settings = AddonSettings()
    setup_logging("DEBUG" if verbose else settings.console_log_level)
    ctx.obj = CliState(settings=settings, project=project, module=module)


def _run(action: Callable[[], T]) -> T:
    """Ejecuta `action`; un `AddonError` termina el comando con código 1."""

    try:
        return action()
    except AddonError as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=1) from exc


def _unavailable(command: str) -> typer.Exit:
    _console.print(f"[yellow]'{command}' is not available for this project.[/yellow]")
    return typer.Exit(code=1)


@cometd_app.command("setup", help="Setup Cometd addon")
def setup(ctx: typer.Context) -> None:
    operations = ctx.obj.operations()
    if not operations.is_setup_available():
        raise _unavailable("cometd setup")

    report = _run(operations.setup)
    _console.print(build_report_table("cometd setup", report))


@cometd_app.command("remove", help="Remove Cometd addon")
def remove(ctx: typer.Context) -> None:
    operations = ctx.obj.operations()
    if not operations.is_remove_available():
        raise _unavailable("cometd remove")

    report = _run(operations.remove)
    _console.print(build_report_table("cometd remove", report))


@cometd_app.command("annotate", help="Annotate a Java type with the add-on marker")
def annotate(
    ctx: typer.Context,
    java_type: str = typer.Argument(..., metavar="TYPE", help="Fully qualified type name."),
) -> None:
    try:
        target = JavaType(fully_qualified_name=java_type)
    except PydanticValidationError as exc:
        raise typer.BadParameter(f"'{java_type}' is not a Java type name") from exc

    operations = ctx.obj.operations()
    if _run(lambda: operations.annotate_type(target)):
        _console.print(f"[green]Annotated[/green] {target}")
    else:
        _console.print(f"[dim]No change for {target}[/dim]")


@cometd_app.command("annotate-all", help="Annotate every @RooJavaBean type with the add-on marker")
def annotate_all(ctx: typer.Context) -> None:
    state: CliState = ctx.obj
    annotated = _run(state.operations().annotate_all)
    _console.print(build_annotated_table(annotated, state.settings.marker_annotation))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
