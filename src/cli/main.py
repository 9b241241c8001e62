"""CLI principal (Typer).

Flujo:
1. Arranque: si la caché no existe, está vacía o se pide `--regenerate`, se
   reconstruye desde los cuatro proveedores.
2. Bucle interactivo: cada línea se valida, se busca en la caché y, si no está,
   se consultan NS y WHOIS en vivo.

Códigos de salida: 1 ante errores de almacenamiento, caché vacía tras el
refresco o algún proveedor fallido (salvo `--allow-partial`); 0 en el resto.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.dns_lookup import lookup_nameservers
from adapters.providers import build_gateways
from adapters.sqlite_store import SqliteInventoryStore
from adapters.whois_lookup import lookup_whois
from cli import doctor
from cli.ui_components import build_refresh_table, print_banner, render_outcome
from core.config import AppSettings
from core.credentials import LoadedAccounts, load_accounts
from core.domain.errors import StorageError
from core.domain.models import Provider
from core.interfaces.gateway import ProviderGateway
from core.services.fallback_resolver import FallbackResolver
from core.services.inventory_cache import InventoryCache
from core.services.lookup import LookupOrchestrator

app = typer.Typer(
    add_completion=False,
    help="Find which provider/account owns a domain (OVH, Cloudflare, GoDaddy, DonDominio).",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


@dataclass
class Runtime:
    """Grafo de objetos de una ejecución (inyección por constructor)."""

    settings: AppSettings
    store: SqliteInventoryStore
    gateways: dict[Provider, ProviderGateway]
    cache: InventoryCache
    orchestrator: LookupOrchestrator


def build_runtime(settings: AppSettings, *, proxy: str | None = None) -> Runtime:
    store = SqliteInventoryStore(settings.db_path)
    if proxy or settings.socks5_proxy:
        logger.info("DonDominio requests go through SOCKS5 proxy %s", proxy or settings.socks5_proxy)

    def accounts_loader(provider: Provider) -> LoadedAccounts:
        return load_accounts(provider, settings.credentials_path(provider))

    cache = InventoryCache(store, accounts_loader, parallel=settings.parallel_refresh)
    resolver = FallbackResolver(
        partial(lookup_nameservers, timeout=settings.lookup_timeout_seconds),
        lookup_whois,
        timeout=settings.lookup_timeout_seconds,
    )
    orchestrator = LookupOrchestrator(cache, resolver, max_query_length=settings.max_query_length)
    return Runtime(
        settings=settings,
        store=store,
        gateways=build_gateways(settings, proxy=proxy),
        cache=cache,
        orchestrator=orchestrator,
    )


def _prepare_cache(runner: asyncio.Runner, runtime: Runtime, *, regenerate: bool, allow_partial: bool) -> None:
    """Deja la caché lista o termina el proceso con código 1."""

    _console.print(f"[cyan]> Checking cache {runtime.settings.db_path}[/cyan]")
    try:
        outcome = runner.run(runtime.cache.ensure_populated(runtime.gateways, force=regenerate))
    except StorageError as exc:
        _console.print(f"[red]++ ERROR:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    if outcome is None:
        _console.print(f"  Cache found: {runtime.store.count()} record(s)")
        return

    _console.print(build_refresh_table(outcome))
    if not outcome.populated:
        _console.print("[red]++ ERROR:[/red] Empty cache or not populated correctly")
        raise typer.Exit(code=1)
    if not outcome.ok:
        failed = ", ".join(provider.label() for provider in outcome.failed_providers)
        if not allow_partial:
            _console.print(f"[red]++ ERROR:[/red] some providers failed: {failed}")
            raise typer.Exit(code=1)
        _console.print(f"[yellow]Warning:[/yellow] some providers failed: {failed}")
    _console.print("[cyan]> Cache populated successfully[/cyan]")


def _search_loop(runner: asyncio.Runner, runtime: Runtime, *, once: bool) -> None:
    while True:
        try:
            query = _console.input("[cyan]> Domain to search:[/cyan] ").strip()
            if query:
                outcome = runner.run(runtime.orchestrator.lookup(query))
                render_outcome(_console, outcome)
        except (EOFError, KeyboardInterrupt):
            _console.print()
            return
        except StorageError as exc:
            _console.print(f"[red]++ ERROR:[/red] {escape(str(exc))}")

        if once:
            return


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    regenerate: bool = typer.Option(False, "--regenerate", "--regenerateDB", help="Force cache regeneration."),
    proxy_address: Optional[str] = typer.Option(
        None,
        "--proxy-address",
        "--socks5",
        help="SOCKS5 proxy (host:port) used only for DonDominio.",
    ),
    exit_immediately: bool = typer.Option(
        False,
        "--exit-immediately",
        "--exit",
        help="Exit after preparing the cache, without waiting for user input.",
    ),
    once: bool = typer.Option(False, "--once", help="Answer a single query and exit."),
    allow_partial: bool = typer.Option(
        False,
        "--allow-partial",
        help="Keep going (exit 0) when some providers failed but the cache has records.",
    ),
    db_path: Optional[Path] = typer.Option(None, "--db-path", help="Cache file."),
    configs_dir: Optional[Path] = typer.Option(None, "--configs-dir", help="Credential files directory."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Prepare the domain cache and start the interactive search."""

    configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    overrides: dict[str, object] = {}
    if db_path is not None:
        overrides["db_path"] = db_path
    if configs_dir is not None:
        overrides["configs_dir"] = configs_dir
    settings = AppSettings().model_copy(update=overrides)

    runtime = build_runtime(settings, proxy=proxy_address)
    print_banner(_console, settings.db_path)

    try:
        with asyncio.Runner() as runner:
            _prepare_cache(runner, runtime, regenerate=regenerate, allow_partial=allow_partial)
            if exit_immediately:
                return
            _search_loop(runner, runtime, once=once)
    finally:
        runtime.store.close()


def run() -> None:
    app()
