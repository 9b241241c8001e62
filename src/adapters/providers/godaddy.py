"""Gateway: GoDaddy (API v1 de producción, autenticación `sso-key`)."""

from __future__ import annotations

from pydantic import BaseModel, TypeAdapter
from pydantic.config import ConfigDict

from adapters.providers.base import HttpGateway
from core.domain.models import Provider, ProviderAccount


class GoDaddyDomainSummary(BaseModel):
    model_config = ConfigDict(extra="ignore")

    domain: str


_SUMMARIES = TypeAdapter(list[GoDaddyDomainSummary])


class GoDaddyGateway(HttpGateway):
    provider = Provider.GODADDY

    async def list_domains(self, account: ProviderAccount) -> list[str]:
        api_key = self._secret(account, "api_key")
        api_secret = self._secret(account, "api_secret")
        headers = {"Authorization": f"sso-key {api_key}:{api_secret}"}
        url = f"{self._settings.godaddy_endpoint.rstrip('/')}/v1/domains"

        async with self._client(account, extra_headers=headers) as client:
            payload = await self._send(client, account, "GET", url)

        return [summary.domain for summary in self._parse(account, _SUMMARIES, payload)]
