"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y la política de proxy (SOCKS5 solo donde se pide).
- Facilita testeo: los gateways aceptan un `transport` (p.ej. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def normalize_proxy_url(proxy: str | None) -> str | None:
    """Acepta `host:port` o una URL completa y devuelve una URL de proxy SOCKS5."""

    if not proxy:
        return None
    proxy = proxy.strip()
    if "://" not in proxy:
        return f"socks5://{proxy}"
    return proxy


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    proxy: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los proveedores se comporten igual.
    - `proxy` solo lo usa DonDominio (whitelisting de IP en su API).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        proxy=normalize_proxy_url(proxy),
        transport=transport,
    )
