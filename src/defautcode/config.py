"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

VALID_STRATEGIES = frozenset({"header", "position"})
DEFAULT_SUMMARY_MODEL = "gpt-4o-mini"

RESOLUTION_KEYWORDS = (
    "résolu",
    "réparé",
    "remplacé",
    "changé",
    "installé",
    "corrigé",
    "resolved",
    "repaired",
    "replaced",
    "changed",
    "installed",
    "corrected",
    "fixed",
    "solved",
    "success",
)
DIAGNOSTIC_KEYWORDS = (
    "diagnostic",
    "test",
    "vérif",
    "check",
    "inspect",
    "à tester",
    "à vérifier",
    "possible",
    "likely",
)


class DefautCodeError(Exception):
    """Exception de base pour DefautCode."""


class ConfigError(DefautCodeError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(DefautCodeError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


class LayoutError(ConfigError):
    """Colonnes attendues introuvables dans la ligne d'en-tête."""


class QueryError(DefautCodeError, ValueError):
    """Code défaut de recherche absent ou vide."""


@dataclass(frozen=True)
class ColumnSpec:
    """Déclaration d'un champ du tableur : position par défaut et libellés d'en-tête."""

    field: str
    index: int
    aliases: tuple[str, ...] = ()
    placeholder: str = ""

    @classmethod
    def from_dict(cls, base: ColumnSpec, d: dict[str, Any]) -> ColumnSpec:
        index = d.get("index", base.index)
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            raise ConfigError(f"index invalide pour {base.field!r}: {index!r}")
        aliases = d.get("aliases", list(base.aliases))
        if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
            raise ConfigError(f"aliases doit être une liste de chaînes pour {base.field!r}")
        return replace(
            base,
            index=index,
            aliases=tuple(aliases),
            placeholder=str(d.get("placeholder", base.placeholder)),
        )


DEFAULT_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("sujet", 4, ("Sujet", "Subject")),
    ColumnSpec("model_voiture", 7, ("Modele Voiture", "Modèle", "Modele", "Model"), "Modèle inconnu"),
    ColumnSpec("description", 8, ("Description ticket", "Description")),
    ColumnSpec("solution_q", 16, ("Echanges", "Q"), "Non spécifié"),
    ColumnSpec("solution_s", 18, ("Dernier échange garage", "Dernier echange", "S"), "Non spécifié"),
)
COLUMN_FIELDS = frozenset(c.field for c in DEFAULT_COLUMNS)


@dataclass(frozen=True)
class ScoringRule:
    """Règle de scoring : si un mot-clé apparaît dans le texte, le score de base devient `score`."""

    name: str
    keywords: tuple[str, ...]
    score: int


def _keywords(d: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    val = d.get(key)
    if val is None:
        return default
    if not isinstance(val, list) or not all(isinstance(k, str) and k.strip() for k in val):
        raise ConfigError(f"{key} doit être une liste de chaînes non vides")
    return tuple(val)


@dataclass
class Config:
    """Configuration principale de DefautCode."""

    column_strategy: str = "header"  # header, position
    fuzzy_header_threshold: float = 90.0
    columns: tuple[ColumnSpec, ...] = DEFAULT_COLUMNS

    resolution_keywords: tuple[str, ...] = RESOLUTION_KEYWORDS
    diagnostic_keywords: tuple[str, ...] = DIAGNOSTIC_KEYWORDS
    resolution_score: int = 85
    diagnostic_score: int = 65
    base_score: int = 50

    summary_enabled: bool = False
    summary_model: str = field(default_factory=lambda: os.environ.get("DEFAUTCODE_MODEL", DEFAULT_SUMMARY_MODEL))
    summary_max_matches: int = 10

    history_db: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        column_strategy = d.get("column_strategy", "header")
        fuzzy_header_threshold = float(d.get("fuzzy_header_threshold", 90.0))
        resolution_score = int(d.get("resolution_score", 85))
        diagnostic_score = int(d.get("diagnostic_score", 65))
        base_score = int(d.get("base_score", 50))
        summary_max_matches = int(d.get("summary_max_matches", 10))

        if column_strategy not in VALID_STRATEGIES:
            raise ConfigError(
                f"column_strategy invalide: {column_strategy!r}. Valides: {sorted(VALID_STRATEGIES)}"
            )
        if not 0 <= fuzzy_header_threshold <= 100:
            raise ConfigError(f"fuzzy_header_threshold doit être entre 0 et 100 (got {fuzzy_header_threshold})")
        for name, score in (
            ("resolution_score", resolution_score),
            ("diagnostic_score", diagnostic_score),
            ("base_score", base_score),
        ):
            if not 0 <= score <= 100:
                raise ConfigError(f"{name} doit être entre 0 et 100 (got {score})")
        if summary_max_matches < 1:
            raise ConfigError(f"summary_max_matches doit être >= 1 (got {summary_max_matches})")

        overrides = d.get("columns", {})
        if not isinstance(overrides, dict):
            raise ConfigError("columns doit être un objet {champ: {index, aliases, placeholder}}")
        unknown = set(overrides) - COLUMN_FIELDS
        if unknown:
            raise ConfigError(f"Champs de colonnes inconnus: {sorted(unknown)}. Valides: {sorted(COLUMN_FIELDS)}")
        columns = tuple(
            ColumnSpec.from_dict(spec, overrides[spec.field]) if spec.field in overrides else spec
            for spec in DEFAULT_COLUMNS
        )

        defaults = cls()
        return cls(
            column_strategy=column_strategy,
            fuzzy_header_threshold=fuzzy_header_threshold,
            columns=columns,
            resolution_keywords=_keywords(d, "resolution_keywords", RESOLUTION_KEYWORDS),
            diagnostic_keywords=_keywords(d, "diagnostic_keywords", DIAGNOSTIC_KEYWORDS),
            resolution_score=resolution_score,
            diagnostic_score=diagnostic_score,
            base_score=base_score,
            summary_enabled=bool(d.get("summary_enabled", False)),
            summary_model=d.get("summary_model") or defaults.summary_model,
            summary_max_matches=summary_max_matches,
            history_db=d.get("history_db"),
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """Résout history_db par rapport au répertoire de base (dossier du fichier config)."""
        if self.history_db and not Path(self.history_db).is_absolute():
            self.history_db = str((Path(base_dir) / self.history_db).resolve())

    def scoring_rules(self) -> list[ScoringRule]:
        """Règles de scoring, par ordre de priorité."""
        return [
            ScoringRule("resolution", self.resolution_keywords, self.resolution_score),
            ScoringRule("diagnostic", self.diagnostic_keywords, self.diagnostic_score),
        ]
