"""Caché local del inventario de dominios.

Por qué se reconstruye entera:
- Un refresco vacía el almacén y vuelve a insertar lo que devuelve cada
  proveedor configurado; no hay merge incremental ni TTL.
- Los proveedores son independientes: uno que falla (fichero de credenciales
  ausente, error de API en una cuenta) queda anotado en su informe y el resto
  sigue.

Nota:
- Vaciar antes de escribir implica que un refresco interrumpido deja una
  caché parcial, no la anterior.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Mapping

from core.credentials import LoadedAccounts
from core.domain.errors import CredentialsError, GatewayError, StorageError
from core.domain.models import (
    DomainRecord,
    Provider,
    ProviderRefreshReport,
    RefreshOutcome,
)
from core.interfaces.gateway import ProviderGateway
from core.interfaces.storage import InventoryStore

logger = logging.getLogger(__name__)

AccountsLoader = Callable[[Provider], LoadedAccounts]


class InventoryCache:
    """Multimapa dominio -> DomainRecord sobre un `InventoryStore`.

    Concurrencia:
    - Solo un refresco a la vez (`_refresh_lock`).
    - Los proveedores se consultan en paralelo dentro de un `TaskGroup`; las
      escrituras al almacén pasan por `_write_lock`.
    - Las búsquedas esperan en `_ready` mientras se reconstruye el almacén.
    """

    def __init__(
        self,
        store: InventoryStore,
        accounts_loader: AccountsLoader,
        *,
        parallel: bool = True,
    ) -> None:
        self._store = store
        self._load_accounts = accounts_loader
        self._parallel = parallel
        self._refresh_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()
        self._ready = asyncio.Event()
        self._ready.set()

    @property
    def refreshing(self) -> bool:
        return not self._ready.is_set()

    def is_populated(self) -> bool:
        return self._store.count() > 0

    async def lookup(self, domain: str) -> list[DomainRecord]:
        """Coincidencia exacta (sensible a mayúsculas); `domain` no se normaliza."""

        await self._ready.wait()
        return self._store.query_exact(domain)

    async def refresh(self, gateways: Mapping[Provider, ProviderGateway]) -> RefreshOutcome:
        """Vacía el almacén y lo reconstruye desde todos los gateways.

        `StorageError` se propaga (fatal) y cancela los proveedores que sigan
        en curso; los fallos de gateway solo marcan el informe del proveedor.
        """

        async with self._refresh_lock:
            self._ready.clear()
            try:
                self._store.create_schema()
                self._store.wipe()
                logger.info("Populating cache from %d provider(s)", len(gateways))

                if self._parallel:
                    reports = await self._refresh_concurrently(gateways)
                else:
                    reports = []
                    for provider, gateway in gateways.items():
                        reports.append(await self.refresh_provider(provider, gateway))

                total = self._store.count()
            finally:
                self._ready.set()

        outcome = RefreshOutcome(reports=reports, total_records=total, populated=total > 0)
        if outcome.ok:
            logger.info("Cache refreshed: %d record(s)", total)
        else:
            logger.warning(
                "Cache refreshed with failures (%s): %d record(s)",
                ", ".join(p.value for p in outcome.failed_providers),
                total,
            )
        return outcome

    async def _refresh_concurrently(
        self,
        gateways: Mapping[Provider, ProviderGateway],
    ) -> list[ProviderRefreshReport]:
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self.refresh_provider(provider, gateway))
                    for provider, gateway in gateways.items()
                ]
        except ExceptionGroup as failures:
            storage = failures.subgroup(StorageError)
            if storage is not None:
                raise storage.exceptions[0] from failures
            raise
        return [task.result() for task in tasks]

    async def refresh_provider(self, provider: Provider, gateway: ProviderGateway) -> ProviderRefreshReport:
        """Descarga y guarda los dominios de todas las cuentas de un proveedor.

        Misma rutina para los cuatro: cargar cuentas, listar dominios por
        cuenta e insertar filas. Una cuenta (o línea de credenciales) rota no
        detiene al resto.
        """

        report = ProviderRefreshReport(provider=provider)
        try:
            loaded = self._load_accounts(provider)
        except CredentialsError as exc:
            logger.warning("%s: %s", provider.label(), exc)
            report.errors.append(str(exc))
            return report

        for error in loaded.errors:
            logger.warning("%s: %s", provider.label(), error)
        report.errors.extend(loaded.errors)
        report.accounts = len(loaded.accounts)

        for account in loaded.accounts:
            logger.info("Getting %s data for account %s", provider.label(), account.account_id)
            try:
                domains = await gateway.list_domains(account)
            except GatewayError as exc:
                logger.warning("%s account %s: %s", provider.label(), account.account_id, exc)
                report.errors.append(f"{account.account_id}: {exc}")
                continue

            records = [
                DomainRecord(
                    account_id=account.account_id,
                    real_id=account.real_id,
                    provider=provider,
                    domain=domain,
                )
                for domain in domains
                if domain
            ]
            if len(records) != len(domains):
                logger.debug("%s account %s returned empty domain names", provider.label(), account.account_id)

            async with self._write_lock:
                report.records += self._store.insert_many(records)

        return report

    async def ensure_populated(
        self,
        gateways: Mapping[Provider, ProviderGateway],
        *,
        force: bool = False,
    ) -> RefreshOutcome | None:
        """Refresca si se fuerza, si el almacén no existe o si está vacío.

        Devuelve None cuando se reutiliza la caché existente.
        """

        if force:
            reason = "regeneration requested"
        elif not self._store.exists():
            reason = "cache not found"
        else:
            self._store.create_schema()
            if self.is_populated():
                return None
            reason = "cache is empty"

        logger.info("Refreshing cache: %s", reason)
        return await self.refresh(gateways)
