"""Core: dominio, configuración, contratos y servicios.

No importa adaptadores ni CLI; las dependencias apuntan hacia aquí.
"""
