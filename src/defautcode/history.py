"""Historique des fichiers chargés et des recherches (DuckDB)."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import duckdb

from defautcode.config import DefautCodeError
from defautcode.matching.schema import SearchMatch

MEMORY_DB = ":memory:"

_SCHEMA = (
    "CREATE SEQUENCE IF NOT EXISTS excel_files_id_seq START 1",
    "CREATE SEQUENCE IF NOT EXISTS search_results_id_seq START 1",
    """
    CREATE TABLE IF NOT EXISTS excel_files(
        id INTEGER PRIMARY KEY DEFAULT nextval('excel_files_id_seq'),
        user_id INTEGER NOT NULL,
        file_name VARCHAR NOT NULL,
        file_key VARCHAR NOT NULL,
        row_count INTEGER NOT NULL,
        created_at TIMESTAMP DEFAULT current_timestamp
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS search_results(
        id INTEGER PRIMARY KEY DEFAULT nextval('search_results_id_seq'),
        user_id INTEGER NOT NULL,
        excel_file_id INTEGER NOT NULL,
        search_code VARCHAR NOT NULL,
        results_json VARCHAR NOT NULL,
        ai_summary VARCHAR,
        created_at TIMESTAMP DEFAULT current_timestamp
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_search_results_user ON search_results(user_id)",
)


class HistoryError(DefautCodeError):
    """Erreur d'accès à la base d'historique."""


@dataclass(frozen=True)
class FileRecord:
    id: int
    user_id: int
    file_name: str
    file_key: str
    row_count: int
    created_at: datetime | None = None


@dataclass(frozen=True)
class SearchRecord:
    id: int
    user_id: int
    excel_file_id: int
    search_code: str
    results_json: str
    ai_summary: str
    created_at: datetime | None = None

    @property
    def results(self) -> list[dict]:
        return json.loads(self.results_json)


def matches_to_json(matches: Iterable[SearchMatch]) -> str:
    """Sérialise les correspondances classées (clés camelCase)."""
    return json.dumps([m.to_dict() for m in matches], ensure_ascii=False)


class HistoryStore:
    """
    Stockage DuckDB de l'historique ; une connexion par opération.

    Avec ":memory:", une base unique est ouverte pour la durée de vie du store
    et chaque opération travaille sur un curseur de cette base.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        self._initialized = False
        self._memory: duckdb.DuckDBPyConnection | None = None

    def _connect(self) -> duckdb.DuckDBPyConnection:
        try:
            if self.db_path == MEMORY_DB:
                if self._memory is None:
                    self._memory = duckdb.connect(MEMORY_DB)
                return self._memory.cursor()
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            return duckdb.connect(self.db_path)
        except (OSError, duckdb.Error) as e:
            raise HistoryError(f"Impossible d'ouvrir la base {self.db_path}: {e}") from e

    def init(self) -> None:
        """Crée les tables si nécessaire."""
        if self._initialized:
            return
        try:
            with self._connect() as con:
                for stmt in _SCHEMA:
                    con.execute(stmt)
        except duckdb.Error as e:
            raise HistoryError(f"Initialisation de l'historique impossible: {e}") from e
        self._initialized = True

    def save_file(self, user_id: int, file_name: str, file_key: str, row_count: int) -> int:
        """
        Enregistre un fichier ; un même file_key n'est enregistré qu'une fois par utilisateur.

        Un nouvel enregistrement du même fichier met à jour son nom et son
        nombre de lignes et renvoie l'id existant.
        """
        self.init()
        try:
            with self._connect() as con:
                row = con.execute(
                    "SELECT id FROM excel_files WHERE user_id = ? AND file_key = ? ORDER BY id LIMIT 1",
                    [user_id, file_key],
                ).fetchone()
                if row is not None:
                    con.execute(
                        "UPDATE excel_files SET file_name = ?, row_count = ? WHERE id = ?",
                        [file_name, row_count, row[0]],
                    )
                else:
                    row = con.execute(
                        "INSERT INTO excel_files(user_id, file_name, file_key, row_count) "
                        "VALUES (?, ?, ?, ?) RETURNING id",
                        [user_id, file_name, file_key, row_count],
                    ).fetchone()
        except duckdb.Error as e:
            raise HistoryError(f"Enregistrement du fichier {file_name} impossible: {e}") from e
        return int(row[0])

    def save_search(
        self,
        user_id: int,
        excel_file_id: int,
        search_code: str,
        results_json: str,
        ai_summary: str,
    ) -> int:
        self.init()
        try:
            with self._connect() as con:
                row = con.execute(
                    "INSERT INTO search_results(user_id, excel_file_id, search_code, results_json, ai_summary) "
                    "VALUES (?, ?, ?, ?, ?) RETURNING id",
                    [user_id, excel_file_id, search_code, results_json, ai_summary],
                ).fetchone()
        except duckdb.Error as e:
            raise HistoryError(f"Enregistrement de la recherche {search_code} impossible: {e}") from e
        return int(row[0])

    def list_files(self, user_id: int) -> list[FileRecord]:
        """Fichiers d'un utilisateur, du plus récent au plus ancien."""
        self.init()
        try:
            with self._connect() as con:
                rows = con.execute(
                    "SELECT id, user_id, file_name, file_key, row_count, created_at "
                    "FROM excel_files WHERE user_id = ? ORDER BY id DESC",
                    [user_id],
                ).fetchall()
        except duckdb.Error as e:
            raise HistoryError(f"Lecture des fichiers impossible: {e}") from e
        return [FileRecord(*r) for r in rows]

    def list_searches(self, user_id: int, limit: int = 20) -> list[SearchRecord]:
        """Dernières recherches d'un utilisateur."""
        self.init()
        try:
            with self._connect() as con:
                rows = con.execute(
                    "SELECT id, user_id, excel_file_id, search_code, results_json, coalesce(ai_summary, ''), created_at "
                    f"FROM search_results WHERE user_id = ? ORDER BY id DESC LIMIT {int(limit)}",
                    [user_id],
                ).fetchall()
        except duckdb.Error as e:
            raise HistoryError(f"Lecture de l'historique impossible: {e}") from e
        return [SearchRecord(*r) for r in rows]
