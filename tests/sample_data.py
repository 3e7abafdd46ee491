"""Reusable reference dataset for service-level tests."""

from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from core import schema

ISSUER_ID = 1
PAYMENT_TERM_ID = 1
ACTIVE_ACCOUNT_ID = 2

CLIENT_ACME = 1
CLIENT_BETA = 2

PRODUCT_CONSEIL = 1  # 100.00 until 2024-06-30, then 120.00 (TVA 20)
PRODUCT_FORMATION = 2  # 450.50 from 2024-01-01 (TVA 20)
PRODUCT_LIVRE = 3  # 25.00 from 2025-01-01 only (TVA 5.5)
PRODUCT_SANS_PRIX = 4  # no catalogue entry


def seed_reference_data(engine: Engine) -> None:
    with engine.begin() as conn:
        conn.execute(
            schema.emetteurs.insert(),
            [
                {
                    "id": ISSUER_ID,
                    "nom": "Okayo SAS",
                    "adresse": "35 rue du Bois",
                    "ville": "Paris",
                    "code_postal": "75001",
                    "telephone": "0102030405",
                    "web": "okayo.fr",
                    "siret": "12345678900011",
                    "tva_intracommunautaire": "FR00123456789",
                }
            ],
        )
        conn.execute(schema.conditions_reglement.insert(), [{"id": PAYMENT_TERM_ID, "libelle": "30 jours"}])
        conn.execute(
            schema.comptes_bancaires.insert(),
            [
                {
                    "id": 1,
                    "nom_banque": "Ancienne Banque",
                    "nom_proprietaire": None,
                    "iban": "FR7600000000000000000000001",
                    "bic": None,
                    "date_debut": date(2020, 1, 1),
                    "date_fin": date(2023, 12, 31),
                },
                {
                    "id": ACTIVE_ACCOUNT_ID,
                    "nom_banque": "Banque Actuelle",
                    "nom_proprietaire": "Okayo SAS",
                    "iban": "FR7600000000000000000000002",
                    "bic": "BANKFRPP",
                    "date_debut": date(2024, 1, 1),
                    "date_fin": None,
                },
            ],
        )
        conn.execute(
            schema.taux_tva.insert(),
            [
                {"id": 1, "taux": 20, "date_debut": date(2014, 1, 1), "date_fin": None},
                {"id": 2, "taux": 5.5, "date_debut": date(2014, 1, 1), "date_fin": None},
                {"id": 3, "taux": 19.6, "date_debut": date(2000, 1, 1), "date_fin": date(2013, 12, 31)},
            ],
        )
        conn.execute(
            schema.clients.insert(),
            [
                {
                    "id": CLIENT_ACME,
                    "code_client": "CLI-ACME",
                    "nom": "Acme",
                    "adresse": "1 rue de la Paix",
                    "ville": "Lyon",
                    "code_postal": "69001",
                    "email": None,
                },
                {
                    "id": CLIENT_BETA,
                    "code_client": "CLI-BETA",
                    "nom": "Beta",
                    "adresse": "2 avenue Foch",
                    "ville": "Lille",
                    "code_postal": "59000",
                    "email": "contact@beta.fr",
                },
            ],
        )
        conn.execute(
            schema.produits.insert(),
            [
                {"id": PRODUCT_CONSEIL, "nom_produit": "Conseil", "description": "Journée de conseil"},
                {"id": PRODUCT_FORMATION, "nom_produit": "Formation", "description": None},
                {"id": PRODUCT_LIVRE, "nom_produit": "Livre", "description": None},
                {"id": PRODUCT_SANS_PRIX, "nom_produit": "Prototype", "description": None},
            ],
        )
        conn.execute(
            schema.catalogue.insert(),
            [
                {
                    "id": 1,
                    "produit_id": PRODUCT_CONSEIL,
                    "prix_unitaire_ht": 100,
                    "taux_tva_id": 1,
                    "date_debut": date(2024, 1, 1),
                    "date_fin": date(2024, 6, 30),
                },
                {
                    "id": 2,
                    "produit_id": PRODUCT_CONSEIL,
                    "prix_unitaire_ht": 120,
                    "taux_tva_id": 1,
                    "date_debut": date(2024, 7, 1),
                    "date_fin": None,
                },
                {
                    "id": 3,
                    "produit_id": PRODUCT_FORMATION,
                    "prix_unitaire_ht": 450.5,
                    "taux_tva_id": 1,
                    "date_debut": date(2024, 1, 1),
                    "date_fin": None,
                },
                {
                    "id": 4,
                    "produit_id": PRODUCT_LIVRE,
                    "prix_unitaire_ht": 25,
                    "taux_tva_id": 2,
                    "date_debut": date(2025, 1, 1),
                    "date_fin": None,
                },
            ],
        )


def insert_bulk_invoices(engine: Engine, count: int, *, start: date = date(2024, 1, 1)) -> None:
    """Insère ``count`` factures datées d'un jour à l'autre (références F-000, F-001...)."""

    rows = [
        {
            "reference": f"F-{index:03d}",
            "date_facturation": start + timedelta(days=index),
            "date_echeance": start + timedelta(days=index + 30),
            "client_id": CLIENT_ACME if index % 2 == 0 else CLIENT_BETA,
            "emetteur_id": ISSUER_ID,
            "condition_reglement_id": PAYMENT_TERM_ID,
            "compte_bancaire_id": ACTIVE_ACCOUNT_ID,
            "total_ht": 100,
            "total_ttc": 120,
        }
        for index in range(count)
    ]
    with engine.begin() as conn:
        conn.execute(schema.factures.insert(), rows)


def count_rows(engine: Engine, table) -> int:
    with engine.connect() as conn:
        return int(conn.execute(select(func.count()).select_from(table)).scalar_one())
