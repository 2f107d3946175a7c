"""Calcul de la probabilité de succès d'une solution."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from defautcode.config import Config, ConfigError, ScoringRule


@dataclass(frozen=True)
class ScoreBreakdown:
    """Détail d'un score : règle déclenchée, score de base, ajustement de longueur."""

    rule: str | None
    base: int
    adjustment: int
    score: int


def combined_solution(solution_q: str, solution_s: str) -> str:
    """Texte évalué par le scorer : échanges puis dernier échange garage."""
    return f"{solution_q} {solution_s}"


class SuccessScorer:
    """
    Heuristique explicable de probabilité de succès (20-100).

    Les règles sont évaluées dans l'ordre : la première dont un mot-clé
    apparaît dans le texte (en minuscules) fixe le score de base. La longueur
    du texte ajoute ou retire ensuite un bonus, puis le score est borné.
    """

    def __init__(
        self,
        rules: Sequence[ScoringRule],
        *,
        base_score: int = 50,
        long_text_length: int = 200,
        long_text_bonus: int = 10,
        short_text_length: int = 50,
        short_text_penalty: int = 10,
        min_score: int = 20,
        max_score: int = 100,
    ) -> None:
        if min_score > max_score:
            raise ConfigError(f"min_score ({min_score}) > max_score ({max_score})")
        if short_text_length > long_text_length:
            raise ConfigError(
                f"short_text_length ({short_text_length}) doit être <= long_text_length ({long_text_length})"
            )

        seen: dict[str, str] = {}
        normalized: list[ScoringRule] = []
        for rule in rules:
            keywords = tuple(k.lower() for k in rule.keywords if k.strip())
            if not keywords:
                raise ConfigError(f"La règle {rule.name!r} n'a aucun mot-clé")
            for kw in keywords:
                if kw in seen and seen[kw] != rule.name:
                    raise ConfigError(f"Mot-clé {kw!r} présent dans les règles {seen[kw]!r} et {rule.name!r}")
                seen[kw] = rule.name
            normalized.append(ScoringRule(rule.name, keywords, rule.score))

        self.rules = tuple(normalized)
        self.base_score = base_score
        self.long_text_length = long_text_length
        self.long_text_bonus = long_text_bonus
        self.short_text_length = short_text_length
        self.short_text_penalty = short_text_penalty
        self.min_score = min_score
        self.max_score = max_score

    @classmethod
    def from_config(cls, config: Config) -> SuccessScorer:
        return cls(config.scoring_rules(), base_score=config.base_score)

    def explain(self, text: str) -> ScoreBreakdown:
        lowered = text.lower()
        rule_name = None
        base = self.base_score
        for rule in self.rules:
            if any(kw in lowered for kw in rule.keywords):
                rule_name = rule.name
                base = rule.score
                break

        adjustment = 0
        if len(text) > self.long_text_length:
            adjustment += self.long_text_bonus
        if len(text) < self.short_text_length:
            adjustment -= self.short_text_penalty

        score = min(max(base + adjustment, self.min_score), self.max_score)
        return ScoreBreakdown(rule=rule_name, base=base, adjustment=adjustment, score=score)

    def score(self, text: str) -> int:
        return self.explain(text).score
