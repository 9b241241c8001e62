"""Comando `doctor` (diagnóstico del entorno).

Por qué existe:
- La mayoría de fallos de arranque son de configuración: ficheros de
  credenciales ausentes o mal formados, caché inexistente o DNS sin salida.
- `doctor templates` deja plantillas comentadas con el formato de cada
  proveedor sin pisar ficheros existentes.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adapters.dns_lookup import lookup_nameservers
from adapters.sqlite_store import SqliteInventoryStore
from core.config import AppSettings
from core.credentials import CREDENTIAL_LAYOUTS, load_accounts
from core.domain.errors import CredentialsError, LiveLookupError, StorageError
from core.domain.models import Provider

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_credentials(settings: AppSettings, provider: Provider) -> tuple[bool, str]:
    path = settings.credentials_path(provider)
    try:
        loaded = load_accounts(provider, path)
    except CredentialsError as exc:
        return False, str(exc)
    detail = f"{len(loaded.accounts)} account(s) in {path}"
    if loaded.errors:
        return False, "\n".join([detail, *loaded.errors])
    return True, detail


def _check_cache(db_path: Path) -> tuple[bool, str]:
    if not db_path.is_file():
        return False, f"{db_path} not found (will be created on next run)"
    try:
        with SqliteInventoryStore(db_path) as store:
            store.create_schema()
            total = store.count()
    except StorageError as exc:
        return False, str(exc)
    if total == 0:
        return False, f"{db_path} is empty (will be refreshed on next run)"
    return True, f"{total} record(s) in {db_path}"


async def _check_dns(domain: str, timeout: float) -> tuple[bool, str]:
    try:
        nameservers = await lookup_nameservers(domain, timeout=timeout)
    except LiveLookupError as exc:
        return False, str(exc)
    return True, ", ".join(nameservers)


@app.command()
def run(
    configs_dir: Optional[Path] = typer.Option(None, "--configs-dir", help="Credential files directory."),
    db_path: Optional[Path] = typer.Option(None, "--db-path", help="Cache file."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    if configs_dir is not None:
        settings = settings.model_copy(update={"configs_dir": configs_dir})
    if db_path is not None:
        settings = settings.model_copy(update={"db_path": db_path})

    table = Table(title="Domain Searcher Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    for provider in Provider:
        ok, detail = _check_credentials(settings, provider)
        table.add_row(f"{provider.label()} credentials", "OK" if ok else "FAIL", detail)

    ok_cache, detail_cache = _check_cache(settings.db_path)
    table.add_row("Cache", "OK" if ok_cache else "WARN", detail_cache)

    ok_dns, detail_dns = asyncio.run(_check_dns("example.com", settings.lookup_timeout_seconds))
    table.add_row("DNS resolution", "OK" if ok_dns else "FAIL", detail_dns)

    table.add_row("SOCKS5 proxy", "SET" if settings.socks5_proxy else "OPTIONAL", settings.socks5_proxy or "-")

    _console.print(table)

    if not ok_dns:
        _console.print("\n[yellow]Note:[/yellow] live NS lookups for uncached domains will fail until DNS works.")


@app.command()
def templates(
    configs_dir: Optional[Path] = typer.Option(None, "--configs-dir", help="Where to write the templates."),
) -> None:
    """Write commented credential file templates (existing files are left untouched)."""

    settings = AppSettings()
    if configs_dir is not None:
        settings = settings.model_copy(update={"configs_dir": configs_dir})
    settings.configs_dir.mkdir(parents=True, exist_ok=True)

    for provider in Provider:
        path = settings.credentials_path(provider)
        if path.exists():
            _console.print(f"[dim]Skipping existing[/dim] {path}")
            continue
        layout = CREDENTIAL_LAYOUTS[provider]
        path.write_text(
            f"# {provider.label()} accounts, one per line:\n# {layout.syntax}\n",
            encoding="utf-8",
        )
        _console.print(f"[green]Created[/green] {path}")
