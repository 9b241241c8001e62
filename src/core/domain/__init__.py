"""Modelos, errores y reglas puras del dominio.

Por qué:
- Aquí viven las estructuras de datos y validaciones que no conocen HTTP,
  SQLite, DNS ni CLI: solo conceptos del inventario de dominios.
"""
