"""Tests du service de recherche (validation, résumé, historique)."""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd
import pytest
from conftest import HEADER

from defautcode.config import QueryError
from defautcode.history import HistoryError, HistoryStore
from defautcode.io_excel import ExcelFileError
from defautcode.matching.schema import SearchMatch
from defautcode.service import DefautSearchService, validate_code


class FakeSummarizer:
    def __init__(self, text: str = "Résumé technique", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def generate(self, code: str, matches: Sequence[SearchMatch]) -> str:
        self.calls.append((code, len(matches)))
        if self.error:
            raise self.error
        return self.text


class FailingHistory:
    def save_search(self, *args: Any) -> int:
        raise HistoryError("base verrouillée")


def test_validate_code() -> None:
    assert validate_code(" p20ee ") == " p20ee "
    for bad in ("", "   ", None):
        with pytest.raises(QueryError, match="Le code défaut est requis"):
            validate_code(bad)


def test_search_rejects_empty_code(ticket_grid: list[list[Any]]) -> None:
    with pytest.raises(QueryError):
        DefautSearchService().search(ticket_grid, "  ")


def test_search_success_with_summary(ticket_grid: list[list[Any]]) -> None:
    summarizer = FakeSummarizer()
    response = DefautSearchService(summarizer=summarizer).search(ticket_grid, "p20ee")
    assert response.success
    assert response.code == "P20EE"
    assert len(response.results) == 1
    assert response.summary == "Résumé technique"
    assert summarizer.calls == [("P20EE", 1)]


def test_search_no_match_skips_summary_and_history(ticket_grid: list[list[Any]], tmp_path: Path) -> None:
    summarizer = FakeSummarizer()
    history = HistoryStore(tmp_path / "h.duckdb")
    response = DefautSearchService(summarizer=summarizer, history=history).search(ticket_grid, "NONEXISTENT")
    assert not response.success
    assert response.results == []
    assert response.summary == ""
    assert response.message == "Aucun résultat trouvé pour le code NONEXISTENT"
    assert summarizer.calls == []
    assert history.list_searches(0) == []


def test_search_summary_failure_degrades(ticket_grid: list[list[Any]]) -> None:
    summarizer = FakeSummarizer(error=RuntimeError("service indisponible"))
    response = DefautSearchService(summarizer=summarizer).search(ticket_grid, "P15BE")
    assert response.success
    assert response.summary == ""
    assert len(response.results) == 1


def test_search_persists_results(ticket_grid: list[list[Any]], tmp_path: Path) -> None:
    history = HistoryStore(tmp_path / "h.duckdb")
    service = DefautSearchService(summarizer=FakeSummarizer("ok"), history=history)
    response = service.search(ticket_grid, "P20EE", user_id=3, file_id=9)

    (record,) = history.list_searches(3)
    assert record.search_code == "P20EE"
    assert record.excel_file_id == 9
    assert record.ai_summary == "ok"
    assert record.results == [m.to_dict() for m in response.results]


def test_search_history_failure_keeps_result(ticket_grid: list[list[Any]]) -> None:
    service = DefautSearchService(history=FailingHistory())  # type: ignore[arg-type]
    response = service.search(ticket_grid, "P20EE")
    assert response.success
    assert response.results[0].success_probability == 85


def test_register_file(tmp_path: Path, ticket_grid: list[list[Any]]) -> None:
    path = tmp_path / "tickets.xlsx"
    pd.DataFrame(ticket_grid).to_excel(path, header=False, index=False, engine="openpyxl")
    history = HistoryStore(tmp_path / "h.duckdb")
    service = DefautSearchService(history=history)

    record = service.register_file(path, user_id=5)
    assert record.id > 0
    assert record.row_count == 2
    assert record.file_name == "tickets.xlsx"
    assert [f.id for f in service.list_files(5)] == [record.id]


def test_register_file_without_history(tmp_path: Path) -> None:
    path = tmp_path / "tickets.xlsx"
    pd.DataFrame([HEADER, ["x"] * len(HEADER)]).to_excel(path, header=False, index=False, engine="openpyxl")
    record = DefautSearchService().register_file(path)
    assert record.id == 0
    assert record.row_count == 1
    assert DefautSearchService().list_files() == []


def test_register_grid_header_only() -> None:
    with pytest.raises(ExcelFileError, match="vide ou invalide"):
        DefautSearchService().register_grid([HEADER], "vide.xlsx", "vide.xlsx")


def test_search_file(tmp_path: Path, ticket_grid: list[list[Any]]) -> None:
    path = tmp_path / "tickets.xlsx"
    pd.DataFrame(ticket_grid).to_excel(path, header=False, index=False, engine="openpyxl")
    response = DefautSearchService().search_file(path, "P15BE")
    assert response.success
    assert response.results[0].row_number == 2
    assert response.results[0].model_voiture == "JUMPER"


def test_response_to_dict(ticket_grid: list[list[Any]]) -> None:
    d = DefautSearchService().search(ticket_grid, "NONEXISTENT").to_dict()
    assert d == {
        "success": False,
        "results": [],
        "summary": "",
        "message": "Aucun résultat trouvé pour le code NONEXISTENT",
    }
