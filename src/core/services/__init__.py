"""Servicios del Core: caché de inventario, fallback en vivo y orquestación de consultas."""
