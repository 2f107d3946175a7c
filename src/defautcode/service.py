"""Service de recherche : validation, moteur, résumé et historique."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from defautcode.config import Config, QueryError
from defautcode.history import FileRecord, HistoryError, HistoryStore, matches_to_json
from defautcode.io_excel import ExcelFileError, load_grid
from defautcode.matching.engine import DefautSearchEngine
from defautcode.matching.schema import SearchMatch
from defautcode.summary import SummaryGenerator, safe_summary

logger = logging.getLogger(__name__)


def validate_code(raw_code: str | None) -> str:
    """
    Vérifie que le code défaut saisi n'est pas vide.

    Raises:
        QueryError: Si le code est absent ou ne contient que des espaces.
    """
    if raw_code is None or not str(raw_code).strip():
        raise QueryError("Le code défaut est requis")
    return str(raw_code)


@dataclass
class SearchResponse:
    """Réponse renvoyée à l'appelant (CLI, API)."""

    success: bool
    code: str
    results: list[SearchMatch] = field(default_factory=list)
    summary: str = ""
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "success": self.success,
            "results": [m.to_dict() for m in self.results],
            "summary": self.summary,
        }
        if self.message:
            d["message"] = self.message
        return d


class DefautSearchService:
    """Point d'entrée applicatif autour du moteur de recherche."""

    def __init__(
        self,
        config: Config | None = None,
        *,
        summarizer: SummaryGenerator | None = None,
        history: HistoryStore | None = None,
    ) -> None:
        self.config = config or Config()
        self.engine = DefautSearchEngine(self.config)
        self.summarizer = summarizer
        self.history = history

    def register_file(self, path: str | Path, user_id: int = 0) -> FileRecord:
        """
        Charge un fichier, vérifie qu'il contient des données et l'enregistre.

        Raises:
            ExcelFileError: Si le fichier est illisible, vide ou sans ligne de données.
        """
        path = Path(path)
        return self.register_grid(load_grid(path), path.name, str(path.resolve()), user_id)

    def register_grid(self, grid: Sequence[Any], file_name: str, file_key: str, user_id: int = 0) -> FileRecord:
        """Enregistre une grille déjà chargée (id=0 sans historique)."""
        if len(grid) < 2:
            raise ExcelFileError("Le fichier Excel est vide ou invalide")

        row_count = len(grid) - 1
        if self.history is None:
            return FileRecord(0, user_id, file_name, file_key, row_count)
        file_id = self.history.save_file(user_id, file_name, file_key, row_count)
        logger.info("Fichier %s enregistré (%d lignes, id=%d)", file_name, row_count, file_id)
        return FileRecord(file_id, user_id, file_name, file_key, row_count)

    def search(
        self,
        grid: Sequence[Any],
        raw_code: str,
        *,
        user_id: int = 0,
        file_id: int = 0,
    ) -> SearchResponse:
        """
        Recherche un code défaut dans une grille déjà chargée.

        Aucun résultat n'est pas une erreur : success=False et un message.
        Le résumé et l'enregistrement ne concernent que les recherches fructueuses ;
        leurs échecs n'altèrent pas les résultats renvoyés.

        Raises:
            QueryError: Si le code est vide.
            LayoutError: Si les colonnes attendues sont introuvables.
        """
        raw_code = validate_code(raw_code)
        outcome = self.engine.run(grid, raw_code)
        if not outcome.found:
            logger.info("Aucun résultat pour %s", outcome.code)
            return SearchResponse(success=False, code=outcome.code, message=outcome.message)

        results = list(outcome.matches)
        summary = safe_summary(self.summarizer, outcome.code, results)

        if self.history is not None:
            try:
                self.history.save_search(user_id, file_id, outcome.code, matches_to_json(results), summary)
            except HistoryError:
                logger.exception("Enregistrement de la recherche %s impossible", outcome.code)

        return SearchResponse(
            success=True,
            code=outcome.code,
            results=results,
            summary=summary,
            message=outcome.message,
        )

    def search_file(
        self,
        path: str | Path,
        raw_code: str,
        *,
        sheet_name: str | None = None,
        user_id: int = 0,
        file_id: int = 0,
    ) -> SearchResponse:
        """Charge le fichier puis lance search()."""
        validate_code(raw_code)
        grid = load_grid(path, sheet_name)
        return self.search(grid, raw_code, user_id=user_id, file_id=file_id)

    def list_files(self, user_id: int = 0) -> list[FileRecord]:
        if self.history is None:
            return []
        return self.history.list_files(user_id)
