"""Schéma relationnel de la facturation (SQLAlchemy Core).

Les tables sont déclarées une seule fois ici : le bootstrap applicatif
(`ensure_schema`) et les tests s'en servent, la migration alembic
`0001_facturation_schema` crée les mêmes objets en production.
"""

from __future__ import annotations

import logging

import sqlalchemy as sa
from sqlalchemy.engine import Engine

LOGGER = logging.getLogger(__name__)

metadata = sa.MetaData()

MONEY = sa.Numeric(12, 2)
QUANTITY = sa.Numeric(12, 3)
RATE = sa.Numeric(5, 2)

clients = sa.Table(
    "clients",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("code_client", sa.String(50), nullable=False),
    sa.Column("nom", sa.String(255), nullable=False),
    sa.Column("adresse", sa.Text, nullable=False),
    sa.Column("ville", sa.String(120), nullable=False),
    sa.Column("code_postal", sa.String(20), nullable=False),
    sa.Column("telephone", sa.String(40)),
    sa.Column("email", sa.String(255)),
    sa.Column("forme_juridique", sa.String(80)),
    sa.Column("date_creation", sa.DateTime, server_default=sa.func.now()),
    sa.UniqueConstraint("code_client", name="uq_clients_code_client"),
)

produits = sa.Table(
    "produits",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("nom_produit", sa.String(255), nullable=False),
    sa.Column("description", sa.Text),
    sa.Column("date_creation", sa.DateTime, server_default=sa.func.now()),
)

taux_tva = sa.Table(
    "taux_tva",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("taux", RATE, nullable=False),
    sa.Column("date_debut", sa.Date),
    sa.Column("date_fin", sa.Date),
)

catalogue = sa.Table(
    "catalogue",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("produit_id", sa.Integer, sa.ForeignKey("produits.id"), nullable=False),
    sa.Column("prix_unitaire_ht", MONEY, nullable=False),
    sa.Column("taux_tva_id", sa.Integer, sa.ForeignKey("taux_tva.id"), nullable=False),
    sa.Column("date_debut", sa.Date, nullable=False),
    sa.Column("date_fin", sa.Date),
    sa.Index("idx_catalogue_produit_periode", "produit_id", "date_debut"),
)

emetteurs = sa.Table(
    "emetteurs",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("nom", sa.String(255), nullable=False),
    sa.Column("adresse", sa.Text),
    sa.Column("ville", sa.String(120)),
    sa.Column("code_postal", sa.String(20)),
    sa.Column("telephone", sa.String(40)),
    sa.Column("web", sa.String(255)),
    sa.Column("siret", sa.String(20)),
    sa.Column("tva_intracommunautaire", sa.String(32)),
)

conditions_reglement = sa.Table(
    "conditions_reglement",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("libelle", sa.String(255), nullable=False),
)

comptes_bancaires = sa.Table(
    "comptes_bancaires",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("nom_banque", sa.String(255), nullable=False),
    sa.Column("nom_proprietaire", sa.String(255)),
    sa.Column("iban", sa.String(34), nullable=False),
    sa.Column("bic", sa.String(11)),
    sa.Column("date_debut", sa.Date),
    sa.Column("date_fin", sa.Date),
)

factures = sa.Table(
    "factures",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("reference", sa.String(50), nullable=False),
    sa.Column("date_facturation", sa.Date, nullable=False),
    sa.Column("date_echeance", sa.Date, nullable=False),
    sa.Column("client_id", sa.Integer, sa.ForeignKey("clients.id"), nullable=False),
    sa.Column("emetteur_id", sa.Integer, sa.ForeignKey("emetteurs.id"), nullable=False),
    sa.Column("condition_reglement_id", sa.Integer, sa.ForeignKey("conditions_reglement.id"), nullable=False),
    sa.Column("compte_bancaire_id", sa.Integer, sa.ForeignKey("comptes_bancaires.id"), nullable=False),
    sa.Column("total_ht", MONEY, nullable=False, server_default="0"),
    sa.Column("total_ttc", MONEY, nullable=False, server_default="0"),
    sa.Column("date_creation", sa.DateTime, server_default=sa.func.now()),
    sa.UniqueConstraint("reference", name="uq_factures_reference"),
    sa.Index("idx_factures_date", "date_facturation"),
    sa.Index("idx_factures_client", "client_id"),
)

lignes_facture = sa.Table(
    "lignes_facture",
    metadata,
    sa.Column("id", sa.Integer, primary_key=True),
    sa.Column("facture_id", sa.Integer, sa.ForeignKey("factures.id", ondelete="CASCADE"), nullable=False),
    sa.Column("numero_ligne", sa.Integer, nullable=False),
    sa.Column("designation", sa.String(255), nullable=False),
    sa.Column("quantite", QUANTITY, nullable=False),
    sa.Column("prix_unitaire_ht", MONEY, nullable=False),
    sa.Column("taux_tva", RATE, nullable=False),
    sa.Column("total_ht_ligne", MONEY, nullable=False),
    sa.Column("total_tva_ligne", MONEY, nullable=False),
    sa.UniqueConstraint("facture_id", "numero_ligne", name="uq_lignes_facture_numero"),
)


def ensure_schema(engine: Engine) -> None:
    """Crée les tables manquantes (idempotent)."""

    metadata.create_all(engine, checkfirst=True)


def bootstrap_schema(engine: Engine) -> None:
    """Initialise le schéma au démarrage sans bloquer l'application si la base est indisponible."""

    try:
        ensure_schema(engine)
    except Exception as exc:  # pragma: no cover - on journalise pour ne pas bloquer le démarrage
        LOGGER.warning("Bootstrap du schéma ignoré (erreur DB): %s", exc)


__all__ = [
    "metadata",
    "clients",
    "produits",
    "taux_tva",
    "catalogue",
    "emetteurs",
    "conditions_reglement",
    "comptes_bancaires",
    "factures",
    "lignes_facture",
    "ensure_schema",
    "bootstrap_schema",
]
