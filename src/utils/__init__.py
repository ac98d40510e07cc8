"""Utilidades compartidas: logging estructurado."""
