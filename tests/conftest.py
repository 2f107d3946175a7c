"""Fixtures partagées : grille de tickets au format du tableur hotline."""

from __future__ import annotations

from typing import Any

import pytest

HEADER = [
    "id",
    "Flux",
    "Etat",
    "Date Création ticket",
    "Sujet",
    "Plaque Immatriculation",
    "Marque Voiture",
    "Modele Voiture",
    "Description ticket",
    "Raison sociale garage",
    "Hotliner",
    "Famille",
    "Distributeur",
    "Réseau",
    "Réseau détaillé",
    "Année première immatriculation",
    "Echanges",
    "Carburant",
    "Dernier échange garage",
]


def make_row(
    description: Any,
    solution_q: Any = "",
    solution_s: Any = "",
    *,
    sujet: Any = "",
    model: Any = "",
) -> list[Any]:
    """Ligne de 19 colonnes avec les champs utiles aux bonnes positions."""
    row: list[Any] = [""] * len(HEADER)
    row[4] = sujet
    row[7] = model
    row[8] = description
    row[16] = solution_q
    row[18] = solution_s
    return row


@pytest.fixture
def ticket_grid() -> list[list[Any]]:
    first = [
        83388,
        "Web",
        "Cloturé avec procédure",
        "2025-01-02 11:03:43",
        "PANNE FAP",
        "GW-422-VS",
        "CITROEN",
        "JUMPER",
        "VOYANT ALLUMÉ MODE DEGRADÉ DEFAUT P15BE RELAIS VOUGIE DU FAP",
        "GARAGE SAINT JACQUES",
        "Adrien Lebrun",
        "admission - echappement-suralimentation",
        "MARCEUL ST PIERRE DES CORP",
        "Top Garage",
        "Top garage",
        2012,
        "<p>Bonjour, merci pour le retour.</p><p>F26 + BSM HS</p>",
        "GAZOLE",
        "<p>Bonjour, </p><p>J'ai appliquer les note technique 2 panne fusible f26</p>",
    ]
    second = [
        83389,
        "Web",
        "Cloturé",
        "2025-01-03 10:00:00",
        "PANNE MOTEUR",
        "AB-123-CD",
        "PEUGEOT",
        "308",
        "CODE DEFAUT P20EE PROBLEME CAPTEUR OXYGENE",
        "GARAGE DUPONT",
        "Jean Dupont",
        "admission - echappement",
        "PARIS",
        "Network",
        "Network",
        2015,
        "<p>Remplacement capteur O2</p>",
        "ESSENCE",
        "<p>Capteur remplacé avec succès</p>",
    ]
    return [list(HEADER), first, second]
