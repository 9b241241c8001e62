"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los resultados se devuelven estructurados; la capa de presentación decide
  cómo pintarlos.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Provider(str, Enum):
    """Proveedores de registro/DNS soportados."""

    OVH = "ovh"
    CLOUDFLARE = "cloudflare"
    GODADDY = "godaddy"
    DONDOMINIO = "dondominio"

    def label(self) -> str:
        """Nombre legible para tablas y logs."""

        return {
            Provider.OVH: "OVH",
            Provider.CLOUDFLARE: "Cloudflare",
            Provider.GODADDY: "GoDaddy",
            Provider.DONDOMINIO: "DonDominio",
        }[self]


class ProviderAccount(BaseModel):
    """Una cuenta de proveedor leída del fichero de credenciales.

    `secrets` es opaco para el Core: solo el gateway del proveedor sabe
    interpretarlo.
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    account_id: str = Field(..., min_length=1, description="Login/ID usado para autenticar.")
    real_id: str = Field(..., description="Identificador visible de la cuenta (alias, ID de facturación).")
    secrets: dict[str, str] = Field(default_factory=dict, repr=False)


class DomainRecord(BaseModel):
    """Una fila (cuenta, dominio) descubierta en un proveedor.

    Por qué no hay clave única:
    - Un mismo dominio puede estar en varias cuentas o proveedores (registro en
      uno, DNS en otro). La caché es un multimapa dominio -> registros.
    """

    model_config = ConfigDict(frozen=True)

    account_id: str = Field(..., description="Login/ID de la cuenta en el proveedor.")
    real_id: str = Field(..., description="Identificador visible de la cuenta.")
    provider: Provider = Field(..., description="Proveedor de origen.")
    domain: str = Field(
        ...,
        min_length=1,
        description="Dominio tal y como lo devuelve el proveedor (sin normalizar).",
    )


class WhoisInfo(BaseModel):
    """Datos WHOIS normalizados de un dominio."""

    domain_name: str | None = None
    registrar: str | None = None
    creation_date: datetime | None = None
    expiration_date: datetime | None = None
    name_servers: list[str] = Field(default_factory=list)
    status: list[str] = Field(default_factory=list)
    raw: dict[str, Any] = Field(
        default_factory=dict,
        description="Carga útil cruda para auditoría (valores serializables).",
    )


class FallbackResult(BaseModel):
    """Resultado de los lookups en vivo (NS + WHOIS) tras un fallo de caché.

    Cada campo falla de forma independiente: si `nameservers` es None,
    `nameservers_error` explica por qué; igual para WHOIS.
    """

    domain: str
    nameservers: list[str] | None = None
    nameservers_error: str | None = None
    whois: WhoisInfo | None = None
    whois_error: str | None = None

    @property
    def has_nameservers(self) -> bool:
        return self.nameservers is not None

    @property
    def has_whois(self) -> bool:
        return self.whois is not None


class LookupStatus(str, Enum):
    """Estados terminales de una consulta."""

    REJECTED = "rejected"
    FOUND = "found"
    NOT_FOUND = "not_found"


class LookupOutcome(BaseModel):
    """Resultado de una consulta completa (validación + caché + fallback)."""

    query: str
    status: LookupStatus
    records: list[DomainRecord] = Field(default_factory=list)
    fallback: FallbackResult | None = None
    rejection: str | None = Field(default=None, description="Motivo del rechazo sintáctico.")
    rejection_kind: str | None = None


class ProviderRefreshReport(BaseModel):
    """Lo que aportó (o no) un proveedor durante un refresco."""

    provider: Provider
    accounts: int = 0
    records: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class RefreshOutcome(BaseModel):
    """Resultado agregado de un refresco completo."""

    reports: list[ProviderRefreshReport] = Field(default_factory=list)
    total_records: int = 0
    populated: bool = False
    finished_at: datetime = Field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        """True solo si todos los proveedores terminaron sin errores."""

        return all(report.ok for report in self.reports)

    @property
    def failed_providers(self) -> list[Provider]:
        return [report.provider for report in self.reports if not report.ok]
