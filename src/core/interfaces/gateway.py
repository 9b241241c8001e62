"""Contrato de los gateways de proveedor.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Los cuatro proveedores (OVH, Cloudflare, GoDaddy, DonDominio) son cajas
  negras intercambiables: dado una cuenta, devuelven sus dominios.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Provider, ProviderAccount


@runtime_checkable
class ProviderGateway(Protocol):
    """Contrato mínimo de un cliente de proveedor.

    Reglas de diseño:
    - `list_domains` es asíncrono porque hace I/O (HTTP).
    - Cualquier fallo se traduce a `GatewayError`; nunca devuelve datos parciales.
    """

    provider: Provider

    async def list_domains(self, account: ProviderAccount) -> list[str]:
        """Devuelve los dominios de `account` tal cual los reporta el proveedor."""

        ...
