"""Piezas comunes de los gateways de proveedor.

Todos los gateways hablan JSON sobre HTTP y deben traducir cualquier fallo
(transporte, status, JSON inválido, esquema inesperado) a `GatewayError`.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import GatewayError
from core.domain.models import Provider, ProviderAccount

T = TypeVar("T")


class HttpGateway:
    """Base de los gateways HTTP: settings, transport inyectable y helpers."""

    provider: Provider

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def _error(self, account: ProviderAccount, message: str) -> GatewayError:
        return GatewayError(message, provider=self.provider.value, account_id=account.account_id)

    def _secret(self, account: ProviderAccount, name: str) -> str:
        value = account.secrets.get(name)
        if not value:
            raise self._error(account, f"missing credential field '{name}'")
        return value

    def _client(self, account: ProviderAccount, **kwargs: Any) -> httpx.AsyncClient:
        """Crea el cliente HTTP; un proxy o una URL inválidos fallan solo esta cuenta."""

        try:
            return build_async_client(self._settings, transport=self._transport, **kwargs)
        except (ValueError, httpx.InvalidURL) as exc:
            raise self._error(account, f"invalid HTTP client configuration: {exc}") from exc

    async def _send(
        self,
        client: httpx.AsyncClient,
        account: ProviderAccount,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Any:
        """Envía la petición y devuelve el JSON decodificado."""

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise self._error(account, f"request to {url} failed: {exc}") from exc

        if response.status_code >= 400:
            detail = response.text.strip()[:200]
            raise self._error(account, f"HTTP {response.status_code} from {url}: {detail}")

        try:
            return response.json()
        except ValueError as exc:
            raise self._error(account, f"invalid JSON from {url}: {response.text[:200]!r}") from exc

    def _parse(self, account: ProviderAccount, adapter: TypeAdapter[T], payload: Any) -> T:
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise self._error(account, f"unexpected payload: {exc.error_count()} validation error(s)") from exc
