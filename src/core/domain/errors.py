"""Jerarquía de errores del dominio.

Por qué una jerarquía propia:
- Los servicios deciden qué se recupera (sintaxis, proveedor, lookup en vivo)
  y qué es fatal (almacenamiento) según el tipo, no según el mensaje.
- Los adaptadores traducen excepciones de librerías (httpx, sqlite3, dnspython,
  python-whois) a estos tipos en el borde.
"""

from __future__ import annotations

from enum import Enum


class DomainSearcherError(Exception):
    """Base de todos los errores de la aplicación."""


class SyntaxErrorKind(str, Enum):
    """Motivo por el que un nombre no es un hostname ASCII válido."""

    EMPTY_NAME = "empty_name"
    TOO_LONG = "too_long"
    EMPTY_LABEL = "empty_label"
    LABEL_TOO_LONG = "label_too_long"
    LABEL_LEADING_HYPHEN = "label_leading_hyphen"
    LABEL_TRAILING_HYPHEN = "label_trailing_hyphen"
    INVALID_CHARACTER = "invalid_character"
    INVALID_RUNE = "invalid_rune"
    MISSING_TLD = "missing_tld"
    TLD_STARTS_WITH_DIGIT = "tld_starts_with_digit"


class DomainSyntaxError(DomainSearcherError):
    """El nombre consultado no pasa la validación sintáctica."""

    def __init__(
        self,
        kind: SyntaxErrorKind,
        message: str,
        *,
        offset: int | None = None,
        character: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.offset = offset
        self.character = character


class GatewayError(DomainSearcherError):
    """Fallo al listar los dominios de una cuenta de un proveedor."""

    def __init__(self, message: str, *, provider: str, account_id: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.account_id = account_id


class CredentialsError(GatewayError):
    """Fichero de credenciales ausente o con líneas mal formadas."""


class LiveLookupError(DomainSearcherError):
    """Fallo en un lookup en vivo (NS o WHOIS)."""

    def __init__(self, message: str, *, lookup: str, domain: str) -> None:
        super().__init__(message)
        self.lookup = lookup
        self.domain = domain


class StorageError(DomainSearcherError):
    """Fallo del almacenamiento local; fatal para el refresco."""
