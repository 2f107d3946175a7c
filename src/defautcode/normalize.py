"""Normalisation des codes défaut, des cellules et des en-têtes."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")


def _is_missing(val: Any) -> bool:
    return val is None or (isinstance(val, float) and (val != val or val in (float("inf"), float("-inf"))))


def _remove_diacritics(s: str) -> str:
    """Retire les diacritiques (accents) d'une chaîne."""
    nfd = unicodedata.normalize("NFD", s)
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn")


def normalize_code(raw: str) -> str:
    """
    Canonicalise un code défaut pour comparaison.

    strip, majuscules, suppression de tous les espaces internes.
    La ponctuation est conservée. "" -> "".

    >>> normalize_code(" p15 be ")
    'P15BE'
    """
    return _WHITESPACE_RE.sub("", raw.strip().upper())


def cell_text(val: Any) -> str:
    """
    Convertit une cellule brute en texte nettoyé.

    None, NaN et inf donnent "". Les flottants entiers (2012.0) sont rendus
    sans partie décimale.
    """
    if _is_missing(val):
        return ""
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val).strip()


def norm_header(val: Any) -> str:
    """Normalise un libellé d'en-tête : NFKC, espaces simples, lower, sans accents."""
    text = unicodedata.normalize("NFKC", cell_text(val))
    text = _WHITESPACE_RE.sub(" ", text).strip().lower()
    return _remove_diacritics(text)
