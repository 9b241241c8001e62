"""Lookups NS + WHOIS en vivo para dominios que no están en la caché.

Por qué en paralelo y por separado:
- Son independientes: si uno falla, el otro se devuelve igualmente.
- Un único intento por lookup, acotado por `timeout`; sin reintentos.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from core.domain.errors import LiveLookupError
from core.domain.models import FallbackResult
from core.interfaces.lookups import NameserverLookup, WhoisLookup

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FallbackResolver:
    """Lanza ambos lookups a la vez; cada uno falla por su cuenta.

    `timeout=None` desactiva el límite.
    """

    def __init__(
        self,
        nameserver_lookup: NameserverLookup,
        whois_lookup: WhoisLookup,
        *,
        timeout: float | None = 5.0,
    ) -> None:
        self._nameserver_lookup = nameserver_lookup
        self._whois_lookup = whois_lookup
        self._timeout = timeout

    async def resolve(self, domain: str) -> FallbackResult:
        (nameservers, ns_error), (whois, whois_error) = await asyncio.gather(
            self._attempt("ns", self._nameserver_lookup, domain),
            self._attempt("whois", self._whois_lookup, domain),
        )
        return FallbackResult(
            domain=domain,
            nameservers=nameservers,
            nameservers_error=ns_error,
            whois=whois,
            whois_error=whois_error,
        )

    async def _attempt(
        self,
        kind: str,
        lookup: Callable[[str], Awaitable[T]],
        domain: str,
    ) -> tuple[T | None, str | None]:
        try:
            if self._timeout is None:
                value = await lookup(domain)
            else:
                value = await asyncio.wait_for(lookup(domain), self._timeout)
        except TimeoutError:
            error = f"{kind.upper()} lookup timed out after {self._timeout:g}s"
        except LiveLookupError as exc:
            error = str(exc)
        else:
            return value, None

        logger.warning("%s lookup failed for %s: %s", kind.upper(), domain, error)
        return None, error
