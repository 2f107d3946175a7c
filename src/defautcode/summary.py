"""Résumé technique des solutions trouvées, via un modèle de génération de texte."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import Any, Protocol

from openai import OpenAI

from defautcode.config import DEFAULT_SUMMARY_MODEL, DefautCodeError
from defautcode.matching.schema import SearchMatch

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Tu es un assistant technique expert en diagnostic automobile. Tu dois générer des résumés "
    "techniques concis et directs pour les techniciens hotline."
)


class SummaryError(DefautCodeError):
    """Échec de génération du résumé."""


class SummaryGenerator(Protocol):
    def generate(self, code: str, matches: Sequence[SearchMatch]) -> str: ...


def build_summary_messages(
    code: str,
    matches: Sequence[SearchMatch],
    max_matches: int = 10,
) -> list[dict[str, str]]:
    """Construit les messages chat (system + user) pour le résumé d'un code."""
    blocks = [
        f"Solution {i + 1}:\n- Modèle: {m.model_voiture}\n- Échanges: {m.solution_q}\n- Dernier échange: {m.solution_s}"
        for i, m in enumerate(matches[:max_matches])
    ]
    user = (
        f"Génère un résumé technique concis (2-3 phrases maximum) pour le code défaut {code} "
        f"basé sur les solutions trouvées:\n\n" + "\n\n".join(blocks) + "\n\n"
        "Sois direct, technique et adapté à un technicien hotline automobile."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]


class OpenAISummaryGenerator:
    """Générateur de résumé basé sur l'API chat completions d'OpenAI."""

    def __init__(
        self,
        model: str = DEFAULT_SUMMARY_MODEL,
        *,
        api_key: str | None = None,
        client: Any = None,
        max_matches: int = 10,
    ) -> None:
        self.model = model
        self.max_matches = max_matches
        if client is None:
            api_key = api_key or os.environ.get("OPENAI_API_KEY", "").strip()
            if not api_key:
                raise SummaryError("OPENAI_API_KEY manquant dans les variables d'environnement")
            client = OpenAI(api_key=api_key)
        self.client = client

    def generate(self, code: str, matches: Sequence[SearchMatch]) -> str:
        messages = build_summary_messages(code, matches, self.max_matches)
        try:
            response = self.client.chat.completions.create(model=self.model, messages=messages)
        except Exception as e:
            raise SummaryError(f"Erreur API OpenAI: {e}") from e

        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return content if isinstance(content, str) else ""


def safe_summary(
    generator: SummaryGenerator | None,
    code: str,
    matches: Sequence[SearchMatch],
) -> str:
    """Résumé ou "" : un échec du générateur ne fait jamais échouer la recherche."""
    if generator is None or not matches:
        return ""
    try:
        return generator.generate(code, matches)
    except Exception:
        logger.exception("Erreur lors de la génération du résumé pour %s", code)
        return ""
