"""Procedimiento de decisión para una consulta.

Flujo:
validar -> caché -> (acierto) FOUND | (fallo) NS/WHOIS en vivo -> NOT_FOUND.

Por qué validar primero:
- Una consulta rechazada por el validador nunca toca la caché ni la red.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from core.domain.errors import DomainSyntaxError, SyntaxErrorKind
from core.domain.models import DomainRecord, FallbackResult, LookupOutcome, LookupStatus
from core.domain.validation import validate_domain_name

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    async def lookup(self, domain: str) -> list[DomainRecord]: ...


class LiveResolver(Protocol):
    async def resolve(self, domain: str) -> FallbackResult: ...


class LookupOrchestrator:
    """Pegamento sin estado entre validador, caché y resolver de fallback.

    Se puede llamar en paralelo para consultas distintas.
    """

    def __init__(
        self,
        cache: RecordSource,
        resolver: LiveResolver,
        *,
        max_query_length: int | None = None,
        validator: Callable[[str], None] = validate_domain_name,
    ) -> None:
        self._cache = cache
        self._resolver = resolver
        self._max_query_length = max_query_length
        self._validate = validator

    async def lookup(self, query: str) -> LookupOutcome:
        try:
            self._check_length(query)
            self._validate(query)
        except DomainSyntaxError as exc:
            logger.debug("Rejected %r: %s", query, exc)
            return LookupOutcome(
                query=query,
                status=LookupStatus.REJECTED,
                rejection=str(exc),
                rejection_kind=exc.kind.value,
            )

        records = await self._cache.lookup(query)
        if records:
            return LookupOutcome(query=query, status=LookupStatus.FOUND, records=records)

        logger.debug("%s not cached, falling back to live lookups", query)
        fallback = await self._resolver.resolve(query)
        return LookupOutcome(query=query, status=LookupStatus.NOT_FOUND, fallback=fallback)

    def _check_length(self, query: str) -> None:
        if self._max_query_length is not None and len(query) >= self._max_query_length:
            raise DomainSyntaxError(
                SyntaxErrorKind.TOO_LONG,
                f"Query length is {len(query)}, must be shorter than {self._max_query_length}",
            )
