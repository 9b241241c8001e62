"""Adaptadores de I/O (HTTP, SQLite, DNS, WHOIS).

Implementan los contratos de `core.interfaces` y traducen las excepciones de
cada librería a los errores del dominio.
"""
