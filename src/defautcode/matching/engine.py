"""Moteur de recherche : scan, détection, scoring et classement."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from defautcode.config import Config
from defautcode.matching.columns import ColumnLayout, resolve_layout
from defautcode.matching.detector import row_matches
from defautcode.matching.scanner import scan_rows
from defautcode.matching.schema import SearchMatch, SearchOutcome
from defautcode.matching.scorers import SuccessScorer, combined_solution
from defautcode.normalize import normalize_code

logger = logging.getLogger(__name__)


def rank_matches(matches: Iterable[SearchMatch]) -> list[SearchMatch]:
    """Trie par probabilité décroissante ; à égalité, l'ordre des lignes est conservé."""
    return sorted(matches, key=lambda m: m.success_probability, reverse=True)


class DefautSearchEngine:
    """Moteur de recherche d'un code défaut dans une grille de tickets."""

    def __init__(self, config: Config | None = None, *, scorer: SuccessScorer | None = None) -> None:
        self.config = config or Config()
        self.scorer = scorer or SuccessScorer.from_config(self.config)

    def layout_for(self, grid: Sequence[Any]) -> ColumnLayout:
        header = grid[0] if grid else None
        return resolve_layout(
            header,
            self.config.columns,
            strategy=self.config.column_strategy,
            fuzzy_threshold=self.config.fuzzy_header_threshold,
        )

    def run(
        self,
        grid: Sequence[Any],
        raw_code: str,
        *,
        layout: ColumnLayout | None = None,
    ) -> SearchOutcome:
        """
        Recherche le code dans toutes les lignes de données de la grille.

        Le code vide n'est pas rejeté ici : la validation se fait en amont
        (voir service.validate_code).

        Returns:
            SearchOutcome avec les correspondances classées (éventuellement aucune).

        Raises:
            LayoutError: Si les colonnes ne peuvent pas être résolues.
        """
        code = normalize_code(raw_code)
        if len(grid) < 2:
            return SearchOutcome(code=code, query=raw_code)

        if layout is None:
            layout = self.layout_for(grid)

        found: list[SearchMatch] = []
        for row in scan_rows(grid, layout):
            if not row_matches(row, code):
                continue
            found.append(
                SearchMatch(
                    row_number=row.row_number,
                    code_found=code,
                    model_voiture=row.model_voiture,
                    sujet=row.sujet,
                    solution_q=row.solution_q,
                    solution_s=row.solution_s,
                    success_probability=self.scorer.score(combined_solution(row.solution_q, row.solution_s)),
                )
            )

        logger.debug("Code %s: %d correspondance(s) sur %d lignes", code, len(found), len(grid) - 1)
        return SearchOutcome(code=code, matches=tuple(rank_matches(found)), query=raw_code)


def search(grid: Sequence[Any], raw_code: str, *, config: Config | None = None) -> SearchOutcome:
    """Raccourci : DefautSearchEngine(config).run(grid, raw_code)."""
    return DefautSearchEngine(config).run(grid, raw_code)
