"""Rapport console et onglets de résultats."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import pandas as pd

from defautcode import __version__
from defautcode.config import Config
from defautcode.matching.schema import SearchMatch
from defautcode.service import SearchResponse

RESULT_COLUMNS = [
    "Ligne",
    "Code",
    "Modèle",
    "Sujet",
    "Échanges (Q)",
    "Dernier échange (S)",
    "Probabilité",
    "Évaluation",
]


def probability_label(score: int) -> str:
    """Libellé affiché pour une probabilité de succès."""
    if score >= 80:
        return "Très probable"
    if score >= 60:
        return "Probable"
    if score >= 40:
        return "Possible"
    return "À explorer"


def build_results_df(matches: Sequence[SearchMatch]) -> pd.DataFrame:
    """Une ligne par correspondance, dans l'ordre du classement."""
    rows = [
        (
            m.row_number,
            m.code_found,
            m.model_voiture,
            m.sujet,
            m.solution_q,
            m.solution_s,
            m.success_probability,
            probability_label(m.success_probability),
        )
        for m in matches
    ]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def build_report_df(response: SearchResponse, config: Config, source: str = "") -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : code, nb résultats, répartition par évaluation, paramètres,
    horodatage, version.
    """
    labels = [probability_label(m.success_probability) for m in response.results]
    rows = [
        ("Metric", "Value"),
        ("code", response.code),
        ("source", source),
        ("nb_results", len(response.results)),
        ("nb_tres_probable", labels.count("Très probable")),
        ("nb_probable", labels.count("Probable")),
        ("nb_possible", labels.count("Possible")),
        ("nb_a_explorer", labels.count("À explorer")),
        ("", ""),
        ("Parameters", ""),
        ("column_strategy", config.column_strategy),
        ("resolution_score", config.resolution_score),
        ("diagnostic_score", config.diagnostic_score),
        ("base_score", config.base_score),
        ("", ""),
        ("summary", response.summary),
        ("timestamp", datetime.now().isoformat()),
        ("version", __version__),
    ]
    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_results_console(response: SearchResponse) -> None:
    """Affiche les résultats classés en console."""
    print(f"\n=== Code défaut {response.code} ===")
    if not response.success:
        print(f"  {response.message}")
        print("======================\n")
        return

    print(f"  {response.message}")
    for i, m in enumerate(response.results, start=1):
        print(f"\n  [{i}] Ligne {m.row_number} - {m.model_voiture} - {m.success_probability}% ({probability_label(m.success_probability)})")
        if m.sujet:
            print(f"      Sujet:            {m.sujet}")
        print(f"      Échanges:         {m.solution_q}")
        print(f"      Dernier échange:  {m.solution_s}")
    if response.summary:
        print("\n  Résumé:")
        print(f"  {response.summary}")
    print("======================\n")
