"""Tests du scorer de probabilité de succès."""

import pytest

from defautcode.config import Config, ConfigError, ScoringRule
from defautcode.matching.scorers import SuccessScorer, combined_solution

REPLACED = "Capteur O2 remplacé, contrôle effectué et véhicule rendu au client sans souci"
DIAGNOSTIC = "Diagnostic en cours avec le garage, attente du retour client demain matin"
GENERIC = "Le client rappellera le garage pour convenir d'un rendez-vous la semaine prochaine"


@pytest.fixture
def scorer() -> SuccessScorer:
    return SuccessScorer.from_config(Config())


def test_fixture_lengths_within_neutral_band() -> None:
    for text in (REPLACED, DIAGNOSTIC, GENERIC):
        assert 50 <= len(text) <= 200


def test_score_resolution_keyword(scorer: SuccessScorer) -> None:
    assert scorer.score(REPLACED) == 85


def test_score_diagnostic_keyword(scorer: SuccessScorer) -> None:
    assert scorer.score(DIAGNOSTIC) == 65


def test_score_no_keyword(scorer: SuccessScorer) -> None:
    assert scorer.score(GENERIC) == 50


def test_score_case_insensitive(scorer: SuccessScorer) -> None:
    assert scorer.score(REPLACED.upper()) == 85


def test_score_english_keywords(scorer: SuccessScorer) -> None:
    assert scorer.score("The oxygen sensor was replaced and the fault code cleared afterwards") == 85
    assert scorer.score("Please check the wiring harness near the catalytic converter today") == 65


def test_resolution_wins_over_diagnostic(scorer: SuccessScorer) -> None:
    text = "Diagnostic effectué puis capteur remplacé, véhicule rendu au client ce jour"
    breakdown = scorer.explain(text)
    assert breakdown.rule == "resolution"
    assert breakdown.score == 85


def test_short_text_penalty(scorer: SuccessScorer) -> None:
    assert scorer.score("OK") == 40
    assert scorer.score("remplacé") == 75
    assert scorer.score("") == 40


def test_long_text_bonus(scorer: SuccessScorer) -> None:
    assert scorer.score("remplacé " + "x" * 250) == 95
    assert scorer.score("y" * 201) == 60
    assert scorer.score("y" * 200) == 50


def test_score_clamped() -> None:
    high = SuccessScorer([ScoringRule("r", ("ok",), 100)])
    assert high.score("ok " + "z" * 300) == 100
    low = SuccessScorer([ScoringRule("r", ("ok",), 90)], base_score=20)
    assert low.score("rien") == 20


def test_score_always_in_range(scorer: SuccessScorer) -> None:
    for text in ["", "a", REPLACED, DIAGNOSTIC * 10, GENERIC * 5, "success " * 100]:
        assert 20 <= scorer.score(text) <= 100


def test_explain_breakdown(scorer: SuccessScorer) -> None:
    b = scorer.explain("OK")
    assert b.rule is None
    assert b.base == 50
    assert b.adjustment == -10
    assert b.score == 40


def test_rule_order_is_priority() -> None:
    scorer = SuccessScorer(
        [ScoringRule("first", ("alpha",), 70), ScoringRule("second", ("beta",), 90)]
    )
    assert scorer.explain("beta alpha " + "-" * 60).rule == "first"


def test_overlapping_keywords_rejected() -> None:
    with pytest.raises(ConfigError, match="test"):
        SuccessScorer([ScoringRule("a", ("test",), 85), ScoringRule("b", ("TEST",), 65)])


def test_empty_rule_rejected() -> None:
    with pytest.raises(ConfigError, match="aucun mot-clé"):
        SuccessScorer([ScoringRule("vide", ("  ",), 85)])


def test_inconsistent_bounds_rejected() -> None:
    with pytest.raises(ConfigError):
        SuccessScorer([], min_score=90, max_score=10)


def test_default_keyword_sets_disjoint() -> None:
    config = Config()
    assert not set(config.resolution_keywords) & set(config.diagnostic_keywords)


def test_combined_solution() -> None:
    assert combined_solution("Q", "S") == "Q S"
    assert combined_solution("Non spécifié", "Non spécifié") == "Non spécifié Non spécifié"
