"""Contrato del almacenamiento de la caché.

El motor concreto (SQLite) vive en `adapters/`; el Core solo necesita
crear esquema, vaciar, insertar, contar y consultar por coincidencia exacta.
Todos los fallos se exponen como `StorageError`.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from core.domain.models import DomainRecord


@runtime_checkable
class InventoryStore(Protocol):
    def exists(self) -> bool:
        """True si el almacenamiento persistido ya existía."""
        ...

    def create_schema(self) -> None: ...

    def wipe(self) -> None: ...

    def insert_many(self, records: Iterable[DomainRecord]) -> int:
        """Inserta en una sola transacción y devuelve cuántas filas escribió."""
        ...

    def count(self) -> int: ...

    def query_exact(self, domain: str) -> list[DomainRecord]: ...
