"""Crée un tableur de tickets hotline de démonstration pour DefautCode."""

import pandas as pd
from pathlib import Path

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)

columns = [
    "id", "Flux", "Etat", "Date Création ticket", "Sujet", "Plaque Immatriculation",
    "Marque Voiture", "Modele Voiture", "Description ticket", "Raison sociale garage",
    "Hotliner", "Famille", "Distributeur", "Réseau", "Réseau détaillé",
    "Année première immatriculation", "Echanges", "Carburant", "Dernier échange garage",
]


def ticket(tid, sujet, marque, modele, description, echanges, dernier, annee, carburant):
    return {
        "id": tid, "Flux": "Web", "Etat": "Cloturé", "Date Création ticket": "2025-01-02 09:00:00",
        "Sujet": sujet, "Plaque Immatriculation": "", "Marque Voiture": marque, "Modele Voiture": modele,
        "Description ticket": description, "Raison sociale garage": "GARAGE DEMO", "Hotliner": "Demo",
        "Famille": "", "Distributeur": "", "Réseau": "", "Réseau détaillé": "",
        "Année première immatriculation": annee, "Echanges": echanges, "Carburant": carburant,
        "Dernier échange garage": dernier,
    }


tickets = pd.DataFrame(
    [
        ticket(83388, "PANNE FAP", "CITROEN", "JUMPER",
               "VOYANT ALLUMÉ MODE DEGRADÉ DEFAUT P15BE RELAIS BOUGIE DU FAP",
               "<p>F26 + BSM HS</p>", "<p>Note technique appliquée, fusible F26 changé</p>", 2012, "GAZOLE"),
        ticket(83389, "PANNE MOTEUR", "PEUGEOT", "308",
               "CODE DEFAUT P20EE PROBLEME CAPTEUR OXYGENE",
               "<p>Remplacement capteur O2</p>", "<p>Capteur remplacé avec succès</p>", 2015, "ESSENCE"),
        ticket(83390, "VOYANT MOTEUR", "PEUGEOT", "3008",
               "p20ee apres regeneration",
               "Diagnostic à faire sur le faisceau", "", 2017, "GAZOLE"),
        ticket(83391, "RATES MOTEUR", "RENAULT", "CLIO",
               "DEFAUT P0300 RATES D'ALLUMAGE",
               "Vérifier les bobines et les bougies", "Client injoignable", 2014, "ESSENCE"),
    ],
    columns=columns,
)

tickets.to_excel(DATA_DIR / "tickets.xlsx", sheet_name="Worksheet", index=False, engine="openpyxl")
print(f"Fichier créé dans {DATA_DIR}")
