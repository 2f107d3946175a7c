"""Parcours des lignes de la grille et extraction des champs de ticket."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from defautcode.matching.columns import ColumnLayout, is_row
from defautcode.matching.schema import TicketRow


def scan_rows(grid: Sequence[Any], layout: ColumnLayout) -> Iterator[TicketRow]:
    """
    Produit un TicketRow par ligne de données (la ligne 0 est l'en-tête).

    Les lignes qui ne sont pas des séquences sont ignorées. Le numéro de
    ligne est celui du fichier : la première ligne de données est la ligne 2.
    """
    for i in range(1, len(grid)):
        row = grid[i]
        if not is_row(row):
            continue
        yield TicketRow(
            row_number=i + 1,
            sujet=layout.cell(row, "sujet"),
            model_voiture=layout.cell(row, "model_voiture"),
            description=layout.cell(row, "description"),
            solution_q=layout.cell(row, "solution_q"),
            solution_s=layout.cell(row, "solution_s"),
        )
