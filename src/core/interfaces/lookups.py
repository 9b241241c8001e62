"""Contratos de los lookups en vivo (NS y WHOIS).

Son simples callables asíncronos: así el resolver de fallback recibe
funciones por constructor y los tests pasan lambdas/AsyncMock.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from core.domain.models import WhoisInfo

NameserverLookup = Callable[[str], Awaitable[list[str]]]
WhoisLookup = Callable[[str], Awaitable[WhoisInfo]]
