"""Lectura de ficheros de credenciales por proveedor.

Formato de los ficheros `*.list`:
- Una cuenta por línea, campos separados por `:`.
- Líneas vacías y líneas que empiezan por `#` se ignoran.

El orden de campos depende del proveedor; `CREDENTIAL_LAYOUTS` es la única
fuente de verdad (también la usa `doctor templates`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from core.domain.errors import CredentialsError
from core.domain.models import Provider, ProviderAccount


@dataclass(frozen=True)
class CredentialLayout:
    """Orden de campos de una línea y cómo derivar los IDs de cuenta."""

    fields: tuple[str, ...]
    account_field: str
    real_id_field: str

    @property
    def syntax(self) -> str:
        return ":".join(self.fields)


CREDENTIAL_LAYOUTS: dict[Provider, CredentialLayout] = {
    Provider.OVH: CredentialLayout(
        fields=("account_id", "app_key", "app_secret", "consumer_key", "real_id"),
        account_field="account_id",
        real_id_field="real_id",
    ),
    Provider.CLOUDFLARE: CredentialLayout(
        fields=("email", "api_key"),
        account_field="email",
        real_id_field="email",
    ),
    Provider.GODADDY: CredentialLayout(
        fields=("account_id", "api_key", "api_secret", "real_id"),
        account_field="account_id",
        real_id_field="real_id",
    ),
    Provider.DONDOMINIO: CredentialLayout(
        fields=("account_id", "username", "password"),
        account_field="account_id",
        real_id_field="username",
    ),
}


def parse_account_line(provider: Provider, line: str, *, line_number: int | None = None) -> ProviderAccount:
    """Convierte una línea `a:b:c` en `ProviderAccount`.

    Campos extra al final se ignoran; campos de menos es un error.
    """

    layout = CREDENTIAL_LAYOUTS[provider]
    parts = [part.strip() for part in line.split(":")]
    if len(parts) < len(layout.fields):
        where = f" (line {line_number})" if line_number is not None else ""
        raise CredentialsError(
            f"Malformed {provider.value} credentials{where}: expected '{layout.syntax}'",
            provider=provider.value,
        )

    values = dict(zip(layout.fields, parts))
    account_id = values[layout.account_field]
    if not account_id:
        raise CredentialsError(
            f"Empty account id in {provider.value} credentials",
            provider=provider.value,
        )

    identity = {layout.account_field, layout.real_id_field}
    secrets = {key: value for key, value in values.items() if key not in identity}
    return ProviderAccount(
        provider=provider,
        account_id=account_id,
        real_id=values[layout.real_id_field],
        secrets=secrets,
    )


@dataclass
class LoadedAccounts:
    """Cuentas válidas de un fichero más los errores de sus líneas mal formadas.

    Por qué no se aborta el fichero entero:
    - Una línea rota solo invalida esa cuenta; el resto del proveedor se sigue
      refrescando y el error aparece en el informe del refresco.
    """

    accounts: list[ProviderAccount] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def load_accounts(provider: Provider, path: Path) -> LoadedAccounts:
    """Lee todas las cuentas de `path`.

    Raises:
        CredentialsError: si el fichero no existe o no se puede leer. Las
            líneas mal formadas no lanzan: se acumulan en `errors`.
    """

    if not path.is_file():
        layout = CREDENTIAL_LAYOUTS[provider]
        raise CredentialsError(
            f"File does not exist: {path}. Create it with the following content syntax: {layout.syntax}",
            provider=provider.value,
        )
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CredentialsError(f"Unable to read {path}: {exc}", provider=provider.value) from exc

    loaded = LoadedAccounts()
    for number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            loaded.accounts.append(parse_account_line(provider, line, line_number=number))
        except CredentialsError as exc:
            loaded.errors.append(str(exc))
    return loaded
