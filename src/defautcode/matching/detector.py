"""Détection du code défaut dans la description d'un ticket."""

from __future__ import annotations

from defautcode.matching.schema import TicketRow
from defautcode.normalize import normalize_code


def row_matches(row: TicketRow, code: str) -> bool:
    """Vrai si `code` (déjà normalisé) est contenu dans la description normalisée."""
    return code in normalize_code(row.description)
