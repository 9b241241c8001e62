"""Gateways de proveedor (clientes HTTP concretos).

Por qué un paquete:
- Agrupa un módulo por proveedor (OVH, Cloudflare, GoDaddy, DonDominio).
- Cada clase implementa `core.interfaces.gateway.ProviderGateway`.
"""

from __future__ import annotations

from adapters.providers.cloudflare import CloudflareGateway
from adapters.providers.dondominio import DonDominioGateway
from adapters.providers.godaddy import GoDaddyGateway
from adapters.providers.ovh import OvhGateway
from core.config import AppSettings
from core.domain.models import Provider
from core.interfaces.gateway import ProviderGateway


def build_gateways(settings: AppSettings | None = None, *, proxy: str | None = None) -> dict[Provider, ProviderGateway]:
    """Un gateway por proveedor; `proxy` (o `settings.socks5_proxy`) solo afecta a DonDominio."""

    settings = settings or AppSettings()
    return {
        Provider.OVH: OvhGateway(settings),
        Provider.CLOUDFLARE: CloudflareGateway(settings),
        Provider.GODADDY: GoDaddyGateway(settings),
        Provider.DONDOMINIO: DonDominioGateway(settings, proxy=proxy or settings.socks5_proxy),
    }


__all__ = [
    "CloudflareGateway",
    "DonDominioGateway",
    "GoDaddyGateway",
    "OvhGateway",
    "build_gateways",
]
