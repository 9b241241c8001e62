"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- El Core devuelve resultados estructurados; el color y el formato viven aquí.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from rich.align import Align
from rich.markup import escape
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import (
    DomainRecord,
    FallbackResult,
    LookupOutcome,
    LookupStatus,
    RefreshOutcome,
    WhoisInfo,
)


def print_banner(console: Console, db_path: Path) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos.
    """

    title = Text("Domain Searcher", style="bold cyan")
    subtitle = Text("OVH • Cloudflare • GoDaddy • DonDominio (SOCKS5) NS/WHOIS search", style="dim")
    footer = Text(f"cache: {db_path}  •  Ctrl+C to exit", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle, "\n", footer), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_refresh_table(outcome: RefreshOutcome) -> Table:
    """Resumen por proveedor de un refresco de caché."""

    table = Table(title=f"Cache refresh • {outcome.total_records} record(s)")
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Accounts", justify="right")
    table.add_column("Records", justify="right")
    table.add_column("Status")
    table.add_column("Errors", style="red")
    for report in outcome.reports:
        status = Text("OK", style="green") if report.ok else Text("FAIL", style="bold red")
        table.add_row(
            report.provider.label(),
            str(report.accounts),
            str(report.records),
            status,
            Text("\n".join(report.errors)),
        )
    return table


def build_records_table(records: Iterable[DomainRecord]) -> Table:
    table = Table(title="Cached records")
    table.add_column("ID", style="green", no_wrap=True)
    table.add_column("Real ID", style="green")
    table.add_column("Provider", style="cyan")
    table.add_column("Domain", style="white")
    for record in records:
        table.add_row(record.account_id, record.real_id, record.provider.label(), record.domain)
    return table


def build_nameservers_panel(fallback: FallbackResult) -> Panel:
    if fallback.nameservers is None:
        body = Text(f"Unavailable: {fallback.nameservers_error}", style="red")
    elif not fallback.nameservers:
        body = Text("No NS records", style="yellow")
    else:
        body = Text("\n".join(fallback.nameservers), style="green")
    return Panel(body, title=Text("NS servers", style="bold yellow"), border_style="yellow")


def _whois_body(info: WhoisInfo) -> Table:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold")
    grid.add_column(style="green")
    if info.domain_name:
        grid.add_row("Domain", info.domain_name)
    if info.registrar:
        grid.add_row("Registrar", info.registrar)
    if info.creation_date:
        grid.add_row("Created", info.creation_date.date().isoformat())
    if info.expiration_date:
        grid.add_row("Expires", info.expiration_date.date().isoformat())
    if info.name_servers:
        grid.add_row("Name servers", "\n".join(info.name_servers))
    if info.status:
        grid.add_row("Status", "\n".join(info.status))
    return grid


def build_whois_panel(fallback: FallbackResult) -> Panel:
    body: RenderableType
    if fallback.whois is None:
        body = Text(f"Unavailable: {fallback.whois_error}", style="red")
    else:
        body = _whois_body(fallback.whois)
    return Panel(body, title=Text("WHOIS info", style="bold yellow"), border_style="yellow")


def render_outcome(console: Console, outcome: LookupOutcome) -> None:
    """Pinta el resultado de una consulta según su estado terminal."""

    if outcome.status is LookupStatus.REJECTED:
        console.print(f"  [yellow]Invalid domain:[/yellow] {escape(outcome.rejection or '')}")
        return

    if outcome.status is LookupStatus.FOUND:
        console.print(build_records_table(outcome.records))
        return

    console.print("  [yellow]NOT FOUND[/yellow] in cache")
    if outcome.fallback is not None:
        console.print(
            Group(
                build_nameservers_panel(outcome.fallback),
                build_whois_panel(outcome.fallback),
            )
        )
