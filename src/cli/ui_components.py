"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import JavaType
from core.services.cometd_operations import OperationReport


def print_banner(console: Console) -> None:
    title = Text("roo-cometd", style="bold cyan")
    subtitle = Text("CometD servlet • CORS filter • Maven wiring", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_report_table(title: str, report: OperationReport) -> Table:
    """Tabla con lo que cambió en cada descriptor tras `setup`/`remove`."""

    table = Table(title=title)
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("Status", style="green")
    table.add_column("Details", style="dim")

    table.add_row(
        str(report.descriptor.path),
        "updated" if report.descriptor.written else "unchanged",
        "",
    )

    build = report.build
    details = []
    if build.dependencies:
        details.append("dependencies: " + ", ".join(d.coordinates for d in build.dependencies))
    if build.plugins:
        details.append("plugins: " + ", ".join(p.coordinates for p in build.plugins))
    if build.repositories:
        details.append("repositories: " + ", ".join(r.id for r in build.repositories))
    table.add_row("pom.xml", "updated" if build.written else "unchanged", "\n".join(details))
    return table


def build_annotated_table(types: list[JavaType], marker: str) -> Table:
    table = Table(title=f"Types annotated with @{marker.rsplit('.', 1)[-1]}")
    table.add_column("Type", style="magenta")
    for java_type in types:
        table.add_row(str(java_type))
    return table
