"""Lookup WHOIS en vivo (python-whois).

`whois.whois` es bloqueante (socket + parseo), así que se ejecuta en un hilo.
python-whois devuelve un `WhoisEntry` (dict) cuyos campos pueden ser valor
único o lista según el registro del TLD; aquí se normaliza a `WhoisInfo`.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Any, Callable, Mapping

import whois

from core.domain.errors import LiveLookupError
from core.domain.models import WhoisInfo


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        items = value
    else:
        items = [value]
    out: list[str] = []
    for item in items:
        text = str(item).strip()
        if text and text not in out:
            out.append(text)
    return out


def _as_datetime(value: Any) -> datetime | None:
    value = _first(value)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return None


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def whois_entry_to_info(entry: Mapping[str, Any]) -> WhoisInfo:
    domain_name = _first(entry.get("domain_name"))
    return WhoisInfo(
        domain_name=str(domain_name) if domain_name else None,
        registrar=_first(entry.get("registrar")),
        creation_date=_as_datetime(entry.get("creation_date")),
        expiration_date=_as_datetime(entry.get("expiration_date")),
        name_servers=_as_list(entry.get("name_servers")),
        status=_as_list(entry.get("status")),
        raw={key: _jsonable(value) for key, value in entry.items()},
    )


def _query(domain: str, query: Callable[[str], Mapping[str, Any]]) -> WhoisInfo:
    try:
        entry = query(domain)
    except Exception as exc:  # python-whois lanza tipos distintos según versión/TLD
        raise LiveLookupError(f"WHOIS query for {domain} failed: {exc}", lookup="whois", domain=domain) from exc

    if not entry or (entry.get("domain_name") is None and entry.get("registrar") is None):
        raise LiveLookupError(f"No WHOIS record found for {domain}", lookup="whois", domain=domain)
    return whois_entry_to_info(entry)


async def lookup_whois(
    domain: str,
    *,
    query: Callable[[str], Mapping[str, Any]] = whois.whois,
) -> WhoisInfo:
    return await asyncio.to_thread(_query, domain, query)
