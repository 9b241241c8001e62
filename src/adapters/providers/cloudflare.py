"""Gateway: Cloudflare.

Lista las zonas de la cuenta (`GET /zones`) con autenticación email + API key
global. Recorre todas las páginas que indique `result_info.total_pages`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from adapters.providers.base import HttpGateway
from core.domain.models import Provider, ProviderAccount

PAGE_SIZE = 50


class CloudflareZone(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class CloudflareResultInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    page: int = 1
    total_pages: int = 1


class CloudflareZonesPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = False
    errors: list[dict[str, object]] = Field(default_factory=list)
    result: list[CloudflareZone] = Field(default_factory=list)
    result_info: CloudflareResultInfo | None = None


_PAGE = TypeAdapter(CloudflareZonesPage)


class CloudflareGateway(HttpGateway):
    provider = Provider.CLOUDFLARE

    async def list_domains(self, account: ProviderAccount) -> list[str]:
        api_key = self._secret(account, "api_key")
        headers = {
            "X-Auth-Email": account.account_id,
            "X-Auth-Key": api_key,
        }
        url = f"{self._settings.cloudflare_endpoint.rstrip('/')}/zones"

        names: list[str] = []
        page = 1
        async with self._client(account, extra_headers=headers) as client:
            while True:
                payload = await self._send(
                    client,
                    account,
                    "GET",
                    url,
                    params={"page": page, "per_page": PAGE_SIZE},
                )
                zones = self._parse(account, _PAGE, payload)
                if not zones.success:
                    messages = ", ".join(str(err.get("message", err)) for err in zones.errors) or "unknown error"
                    raise self._error(account, f"Cloudflare API error: {messages}")

                names.extend(zone.name for zone in zones.result)
                total_pages = zones.result_info.total_pages if zones.result_info else 1
                if page >= total_pages:
                    break
                page += 1

        return names
