"""Schémas et types pour la recherche par code défaut."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TicketRow:
    """Ligne de ticket extraite du tableur (avant matching)."""

    row_number: int  # 1-based, en-tête = ligne 1
    sujet: str
    model_voiture: str
    description: str
    solution_q: str
    solution_s: str


@dataclass(frozen=True)
class SearchMatch:
    """Une ligne de ticket contenant le code recherché, avec son score."""

    row_number: int
    code_found: str
    model_voiture: str
    sujet: str
    solution_q: str
    solution_s: str
    success_probability: int

    def to_dict(self) -> dict[str, Any]:
        """Forme sérialisée (clés camelCase) utilisée dans l'historique."""
        return {
            "rowNumber": self.row_number,
            "codeFound": self.code_found,
            "modelVoiture": self.model_voiture,
            "sujet": self.sujet,
            "solutionQ": self.solution_q,
            "solutionS": self.solution_s,
            "successProbability": self.success_probability,
        }

    def __repr__(self) -> str:
        return f"SearchMatch(row={self.row_number}, code={self.code_found}, score={self.success_probability})"


@dataclass(frozen=True)
class SearchOutcome:
    """Résultat d'une recherche : code normalisé, saisie brute et correspondances classées."""

    code: str
    matches: tuple[SearchMatch, ...] = ()
    query: str = ""

    @property
    def found(self) -> bool:
        return bool(self.matches)

    @property
    def message(self) -> str:
        if not self.matches:
            return f"Aucun résultat trouvé pour le code {self.query.strip() or self.code}"
        n = len(self.matches)
        return f"{n} résultat{'s' if n > 1 else ''} trouvé{'s' if n > 1 else ''} pour le code {self.code}"
