"""Tests du scan des lignes et de la détection du code."""

from conftest import HEADER, make_row

from defautcode.matching.columns import ColumnLayout, resolve_layout
from defautcode.matching.detector import row_matches
from defautcode.matching.scanner import scan_rows
from defautcode.matching.schema import TicketRow


def _row(description: str) -> TicketRow:
    return TicketRow(2, "", "Modèle inconnu", description, "Non spécifié", "Non spécifié")


def test_scan_skips_header_and_numbers_rows() -> None:
    grid = [HEADER, make_row("A"), make_row("B"), make_row("C")]
    rows = list(scan_rows(grid, resolve_layout(HEADER)))
    assert [r.row_number for r in rows] == [2, 3, 4]
    assert [r.description for r in rows] == ["A", "B", "C"]


def test_scan_skips_malformed_rows() -> None:
    grid = [HEADER, None, "texte libre", make_row("P20EE"), 42, {"a": 1}]
    rows = list(scan_rows(grid, resolve_layout(HEADER)))
    assert len(rows) == 1
    assert rows[0].row_number == 4


def test_scan_placeholders() -> None:
    grid = [HEADER, make_row("P20EE", "  ", None, sujet=None, model="   ")]
    (row,) = scan_rows(grid, resolve_layout(HEADER))
    assert row.model_voiture == "Modèle inconnu"
    assert row.solution_q == "Non spécifié"
    assert row.solution_s == "Non spécifié"
    assert row.sujet == ""


def test_scan_trims_and_coerces() -> None:
    grid = [HEADER, make_row(" P20EE ", " q ", 12.0, sujet=" PANNE ", model=308)]
    (row,) = scan_rows(grid, resolve_layout(HEADER))
    assert row.description == "P20EE"
    assert row.solution_q == "q"
    assert row.solution_s == "12"
    assert row.sujet == "PANNE"
    assert row.model_voiture == "308"


def test_scan_short_row() -> None:
    grid = [HEADER, ["", "", "", "", "Sujet court", "", "", "CLIO", "P0300"]]
    (row,) = scan_rows(grid, ColumnLayout.from_positions())
    assert row.description == "P0300"
    assert row.model_voiture == "CLIO"
    assert row.solution_q == "Non spécifié"


def test_scan_header_only() -> None:
    assert list(scan_rows([HEADER], resolve_layout(HEADER))) == []


def test_row_matches_substring() -> None:
    row = _row("CODE DEFAUT P20EE PROBLEME CAPTEUR OXYGENE")
    assert row_matches(row, "P20EE")
    assert row_matches(row, "P20")
    assert row_matches(row, "20E")
    assert not row_matches(row, "P20EF")


def test_row_matches_ignores_case_and_spaces() -> None:
    row = _row("défaut p 15 be relais bougie")
    assert row_matches(row, "P15BE")


def test_row_matches_across_words() -> None:
    # Les espaces étant supprimés, un code peut chevaucher deux mots.
    row = _row("VOYANT P15 BE")
    assert row_matches(row, "P15BE")
