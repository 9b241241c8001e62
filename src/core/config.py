"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/DNS/WHOIS/SQLite) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import Provider


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "domain-searcher"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "domain-searcher"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "domain-searcher"
    return Path.home() / ".config" / "domain-searcher"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


# Nombres fijos (incluida la mayúscula de `donDominio.list`).
CREDENTIAL_FILENAMES: dict[Provider, str] = {
    Provider.OVH: "ovh.list",
    Provider.CLOUDFLARE: "cloudflare.list",
    Provider.GODADDY: "godaddy.list",
    Provider.DONDOMINIO: "donDominio.list",
}


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOMAIN_SEARCHER_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    db_path: Path = Field(
        default=Path("domain_list.db"),
        description="Fichero SQLite con la caché de dominios.",
    )
    configs_dir: Path = Field(
        default=Path("configs"),
        description="Directorio con los ficheros de credenciales por proveedor.",
    )
    socks5_proxy: str | None = Field(
        default=None,
        description="Proxy SOCKS5 (host:port) usado solo para DonDominio.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request a las APIs de proveedores (segundos).",
    )
    lookup_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout de cada lookup en vivo NS/WHOIS (segundos).",
    )
    user_agent: str = Field(
        default="domain-searcher/0.8",
        min_length=1,
        description="User-Agent para las APIs de proveedores.",
    )
    max_query_length: int = Field(
        default=100,
        ge=1,
        le=256,
        description="Longitud a partir de la cual una consulta interactiva se rechaza.",
    )
    parallel_refresh: bool = Field(
        default=True,
        description="Refrescar proveedores en paralelo (las escrituras siguen serializadas).",
    )

    ovh_endpoint: str = Field(default="https://eu.api.ovh.com/1.0", min_length=8)
    cloudflare_endpoint: str = Field(default="https://api.cloudflare.com/client/v4", min_length=8)
    godaddy_endpoint: str = Field(default="https://api.godaddy.com", min_length=8)
    dondominio_endpoint: str = Field(default="https://simple-api.dondominio.net", min_length=8)

    def credentials_path(self, provider: Provider) -> Path:
        return self.configs_dir / CREDENTIAL_FILENAMES[provider]
