"""Gateway: DonDominio.

Notas:
- La API exige whitelisting de IP; por eso es el único proveedor que puede
  salir por un proxy SOCKS5.
- Siempre responde 200 con un sobre JSON: el fallo real viene en `success`.
"""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from adapters.providers.base import HttpGateway
from core.config import AppSettings
from core.domain.models import Provider, ProviderAccount


class DonDominioDomain(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    status: str | None = None
    tld: str | None = None
    domain_id: int | None = Field(default=None, alias="domainID")
    ts_expir: str | None = Field(default=None, alias="tsExpir")


class DonDominioResponseData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    domains: list[DonDominioDomain] = Field(default_factory=list)


class DonDominioResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    success: bool = False
    error_code: int | None = Field(default=None, alias="errorCode")
    error_code_msg: str | None = Field(default=None, alias="errorCodeMsg")
    response_data: DonDominioResponseData | None = Field(default=None, alias="responseData")


_RESPONSE = TypeAdapter(DonDominioResponse)


class DonDominioGateway(HttpGateway):
    provider = Provider.DONDOMINIO

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        proxy: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, transport=transport)
        self._proxy = proxy

    async def list_domains(self, account: ProviderAccount) -> list[str]:
        password = self._secret(account, "password")
        url = f"{self._settings.dondominio_endpoint.rstrip('/')}/domain/list/"
        form = {"apiuser": account.real_id, "apipasswd": password}

        async with self._client(account, proxy=self._proxy) as client:
            payload = await self._send(client, account, "POST", url, data=form)

        response = self._parse(account, _RESPONSE, payload)
        if not response.success:
            raise self._error(
                account,
                f"DonDominio API error {response.error_code}: {response.error_code_msg or 'unknown error'}",
            )
        if response.response_data is None:
            return []
        return [domain.name for domain in response.response_data.domains]
