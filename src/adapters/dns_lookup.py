"""Lookup NS en vivo (dnspython, resolver asíncrono).

Devuelve los hosts sin el punto final; cualquier fallo de DNS se traduce a
`LiveLookupError` con un mensaje legible.
"""

from __future__ import annotations

import dns.asyncresolver
import dns.exception
import dns.resolver

from core.domain.errors import LiveLookupError


def build_resolver(timeout: float = 5.0) -> dns.asyncresolver.Resolver:
    resolver = dns.asyncresolver.Resolver()
    resolver.timeout = timeout
    resolver.lifetime = timeout
    return resolver


async def lookup_nameservers(
    domain: str,
    *,
    resolver: dns.asyncresolver.Resolver | None = None,
    timeout: float = 5.0,
) -> list[str]:
    resolver = resolver or build_resolver(timeout)
    try:
        answer = await resolver.resolve(domain, "NS")
    except dns.resolver.NXDOMAIN as exc:
        raise LiveLookupError(f"{domain} does not exist (NXDOMAIN)", lookup="ns", domain=domain) from exc
    except dns.resolver.NoAnswer as exc:
        raise LiveLookupError(f"No NS records for {domain}", lookup="ns", domain=domain) from exc
    except dns.resolver.NoNameservers as exc:
        raise LiveLookupError(f"No nameserver could answer for {domain}", lookup="ns", domain=domain) from exc
    except dns.exception.Timeout as exc:
        raise LiveLookupError(f"NS lookup for {domain} timed out", lookup="ns", domain=domain) from exc
    except dns.exception.DNSException as exc:
        raise LiveLookupError(f"NS lookup for {domain} failed: {exc}", lookup="ns", domain=domain) from exc

    return [str(record.target).rstrip(".") for record in answer]
