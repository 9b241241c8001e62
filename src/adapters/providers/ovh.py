"""Gateway: OVH.

API firmada de OVH:
- `X-Ovh-Signature` = "$1$" + sha1(secret+consumer+method+url+body+timestamp).
- El timestamp se toma del servidor (`/auth/time`) para evitar desfases de reloj.
"""

from __future__ import annotations

import hashlib

from pydantic import TypeAdapter

from adapters.providers.base import HttpGateway
from core.domain.models import Provider, ProviderAccount

_DOMAINS = TypeAdapter(list[str])
_SERVER_TIME = TypeAdapter(int)


def sign_request(*, app_secret: str, consumer_key: str, method: str, url: str, body: str, timestamp: str) -> str:
    payload = "+".join([app_secret, consumer_key, method.upper(), url, body, timestamp])
    return "$1$" + hashlib.sha1(payload.encode("utf-8")).hexdigest()  # nosec: protocolo de OVH


class OvhGateway(HttpGateway):
    provider = Provider.OVH

    async def list_domains(self, account: ProviderAccount) -> list[str]:
        app_key = self._secret(account, "app_key")
        app_secret = self._secret(account, "app_secret")
        consumer_key = self._secret(account, "consumer_key")

        endpoint = self._settings.ovh_endpoint.rstrip("/")
        url = f"{endpoint}/domain"

        async with self._client(account) as client:
            timestamp = self._parse(
                account,
                _SERVER_TIME,
                await self._send(client, account, "GET", f"{endpoint}/auth/time"),
            )
            headers = {
                "X-Ovh-Application": app_key,
                "X-Ovh-Consumer": consumer_key,
                "X-Ovh-Timestamp": str(timestamp),
                "X-Ovh-Signature": sign_request(
                    app_secret=app_secret,
                    consumer_key=consumer_key,
                    method="GET",
                    url=url,
                    body="",
                    timestamp=str(timestamp),
                ),
            }
            payload = await self._send(client, account, "GET", url, headers=headers)

        return self._parse(account, _DOMAINS, payload)
