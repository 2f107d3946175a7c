"""Résolution des colonnes du tableur à partir de la ligne d'en-tête."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from rapidfuzz import fuzz, process

from defautcode.config import DEFAULT_COLUMNS, ColumnSpec, LayoutError
from defautcode.normalize import cell_text, norm_header


def is_row(row: Any) -> bool:
    """Vrai si la valeur est une ligne exploitable (séquence, hors chaînes)."""
    return isinstance(row, Sequence) and not isinstance(row, (str, bytes))


@dataclass(frozen=True)
class ColumnLayout:
    """Mapping champ -> index de colonne, résolu une fois par recherche."""

    indices: dict[str, int]
    placeholders: dict[str, str]

    def cell(self, row: Sequence[Any], field: str) -> str:
        """Texte de la cellule du champ, placeholder si vide ou hors ligne."""
        idx = self.indices[field]
        text = cell_text(row[idx]) if idx < len(row) else ""
        return text or self.placeholders.get(field, "")

    @classmethod
    def from_positions(cls, specs: Sequence[ColumnSpec] = DEFAULT_COLUMNS) -> ColumnLayout:
        indices = {s.field: s.index for s in specs}
        _check_distinct(indices)
        return cls(indices=indices, placeholders={s.field: s.placeholder for s in specs})


def _check_distinct(indices: dict[str, int]) -> None:
    """Refuse deux champs lus dans la même colonne."""
    by_index: dict[int, list[str]] = {}
    for field, idx in indices.items():
        by_index.setdefault(idx, []).append(field)
    clashes = [f"{' et '.join(fields)} (colonne {idx})" for idx, fields in by_index.items() if len(fields) > 1]
    if clashes:
        raise LayoutError(f"Plusieurs champs pointent sur la même colonne: {'; '.join(clashes)}")


def _find_in_header(spec: ColumnSpec, labels: dict[int, str], threshold: float) -> int | None:
    """Cherche un champ dans l'en-tête : égalité normalisée d'abord, puis fuzzy."""
    aliases = [norm_header(a) for a in spec.aliases]
    aliases = [a for a in aliases if a]
    for alias in aliases:
        for idx, label in labels.items():
            if label == alias:
                return idx

    best: tuple[int, float] | None = None
    for alias in aliases:
        hit = process.extractOne(alias, labels, scorer=fuzz.ratio, score_cutoff=threshold)
        if hit is None:
            continue
        _, score, idx = hit
        if best is None or score > best[1]:
            best = (int(idx), float(score))
    return best[0] if best else None


def resolve_layout(
    header: Any,
    specs: Sequence[ColumnSpec] = DEFAULT_COLUMNS,
    *,
    strategy: str = "header",
    fuzzy_threshold: float = 90.0,
) -> ColumnLayout:
    """
    Construit le ColumnLayout d'une feuille.

    Args:
        header: Première ligne de la grille.
        specs: Champs attendus.
        strategy: "header" (libellés d'en-tête) ou "position" (index déclarés).
        fuzzy_threshold: Score rapidfuzz minimal pour un libellé approché.

    Raises:
        LayoutError: Si l'en-tête est inutilisable ou si un champ est introuvable.
    """
    if strategy == "position":
        return ColumnLayout.from_positions(specs)
    if strategy != "header":
        raise LayoutError(f"Stratégie de colonnes inconnue: {strategy!r}")
    if not is_row(header):
        raise LayoutError("Ligne d'en-tête absente ou invalide")

    labels = {i: norm_header(v) for i, v in enumerate(header)}
    labels = {i: lab for i, lab in labels.items() if lab}

    indices: dict[str, int] = {}
    missing: list[str] = []
    for spec in specs:
        idx = _find_in_header(spec, labels, fuzzy_threshold)
        if idx is None:
            missing.append(spec.field)
        else:
            indices[spec.field] = idx

    if missing:
        found = [cell_text(v) for v in header if cell_text(v)]
        raise LayoutError(
            f"Colonnes introuvables dans l'en-tête: {', '.join(missing)}. "
            f"En-têtes disponibles: {', '.join(found) or '(aucun)'}"
        )
    _check_distinct(indices)
    return ColumnLayout(indices=indices, placeholders={s.field: s.placeholder for s in specs})
