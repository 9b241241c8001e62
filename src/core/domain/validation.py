"""Validación sintáctica de nombres de dominio.

Reglas (hostname ASCII estricto, no IDN/punycode):
- 1..255 bytes en total.
- Etiquetas de 1..63 bytes con `[A-Za-z0-9-]`, sin guion al principio ni al final.
- El TLD no puede faltar (nombre terminado en punto) ni empezar por dígito.

Se trabaja sobre bytes UTF-8 para que longitudes y offsets coincidan con lo que
viaja por la red; la primera regla que falla gana.
"""

from __future__ import annotations

from core.domain.errors import DomainSyntaxError, SyntaxErrorKind

MAX_NAME_LENGTH = 255
MAX_LABEL_LENGTH = 63

_DOT = ord(".")
_HYPHEN = ord("-")


def _is_label_byte(b: int) -> bool:
    # ordenado por frecuencia esperada
    return (
        0x61 <= b <= 0x7A  # a-z
        or 0x30 <= b <= 0x39  # 0-9
        or b == _HYPHEN
        or 0x41 <= b <= 0x5A  # A-Z
    )


def _is_digit(b: int) -> bool:
    return 0x30 <= b <= 0x39


def _utf8_sequence_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if 0xC0 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF7:
        return 4
    return 1


def _decode_char_at(data: bytes, offset: int) -> str | None:
    """Decodifica el code point que empieza en `offset` (None si no es UTF-8 válido)."""

    size = _utf8_sequence_length(data[offset])
    try:
        char = data[offset : offset + size].decode("utf-8")
    except UnicodeDecodeError:
        return None
    if len(char) != 1 or char == "\ufffd":
        return None
    return char


def _as_bytes(name: str | bytes) -> bytes:
    if isinstance(name, bytes):
        return name
    # surrogatepass: los surrogates sueltos llegan como bytes inválidos y se
    # reportan como INVALID_RUNE en vez de reventar al codificar.
    return name.encode("utf-8", "surrogatepass")


def _text(data: bytes) -> str:
    return data.decode("utf-8", "replace")


def validate_domain_name(name: str | bytes) -> None:
    """Valida `name` y lanza `DomainSyntaxError` con el primer fallo encontrado."""

    data = _as_bytes(name)
    size = len(data)

    if size == 0:
        raise DomainSyntaxError(SyntaxErrorKind.EMPTY_NAME, "Domain name is empty")
    if size > MAX_NAME_LENGTH:
        raise DomainSyntaxError(
            SyntaxErrorKind.TOO_LONG,
            f"Domain name length is {size}, can't exceed {MAX_NAME_LENGTH}",
        )

    start = 0
    for i, b in enumerate(data):
        if b == _DOT:
            label = data[start:i]
            if i == start:
                raise DomainSyntaxError(
                    SyntaxErrorKind.EMPTY_LABEL,
                    f"Domain has invalid character '.' at offset {i}, label can't begin with a period",
                    offset=i,
                    character=".",
                )
            if i - start > MAX_LABEL_LENGTH:
                raise DomainSyntaxError(
                    SyntaxErrorKind.LABEL_TOO_LONG,
                    f"Domain byte length of label '{_text(label)}' is {i - start}, can't exceed {MAX_LABEL_LENGTH}",
                    offset=start,
                )
            if data[start] == _HYPHEN:
                raise DomainSyntaxError(
                    SyntaxErrorKind.LABEL_LEADING_HYPHEN,
                    f"Domain label '{_text(label)}' at offset {start} begins with a hyphen",
                    offset=start,
                )
            if data[i - 1] == _HYPHEN:
                raise DomainSyntaxError(
                    SyntaxErrorKind.LABEL_TRAILING_HYPHEN,
                    f"Domain label '{_text(label)}' at offset {start} ends with a hyphen",
                    offset=start,
                )
            start = i + 1
            continue

        if not _is_label_byte(b):
            char = _decode_char_at(data, i)
            if char is None:
                raise DomainSyntaxError(
                    SyntaxErrorKind.INVALID_RUNE,
                    f"Domain has invalid rune at offset {i}",
                    offset=i,
                )
            raise DomainSyntaxError(
                SyntaxErrorKind.INVALID_CHARACTER,
                f"Domain has invalid character '{char}' at offset {i}",
                offset=i,
                character=char,
            )

    tld = data[start:]
    if start == size:
        raise DomainSyntaxError(
            SyntaxErrorKind.MISSING_TLD,
            "Domain has missing top level domain, domain can't end with a period",
            offset=start,
        )
    if size - start > MAX_LABEL_LENGTH:
        raise DomainSyntaxError(
            SyntaxErrorKind.LABEL_TOO_LONG,
            f"Domain's top level domain '{_text(tld)}' has byte length {size - start}, can't exceed {MAX_LABEL_LENGTH}",
            offset=start,
        )
    if data[start] == _HYPHEN:
        raise DomainSyntaxError(
            SyntaxErrorKind.LABEL_LEADING_HYPHEN,
            f"Domain's top level domain '{_text(tld)}' at offset {start} begins with a hyphen",
            offset=start,
        )
    if data[size - 1] == _HYPHEN:
        raise DomainSyntaxError(
            SyntaxErrorKind.LABEL_TRAILING_HYPHEN,
            f"Domain's top level domain '{_text(tld)}' at offset {start} ends with a hyphen",
            offset=start,
        )
    if _is_digit(data[start]):
        raise DomainSyntaxError(
            SyntaxErrorKind.TLD_STARTS_WITH_DIGIT,
            f"Domain's top level domain '{_text(tld)}' at offset {start} begins with a digit",
            offset=start,
        )


def is_valid_domain_name(name: str | bytes) -> bool:
    try:
        validate_domain_name(name)
    except DomainSyntaxError:
        return False
    return True
