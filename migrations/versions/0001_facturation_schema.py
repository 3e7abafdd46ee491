"""Schéma initial de la facturation (clients, produits, catalogue daté, factures)."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_facturation_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code_client", sa.String(50), nullable=False),
        sa.Column("nom", sa.String(255), nullable=False),
        sa.Column("adresse", sa.Text(), nullable=False),
        sa.Column("ville", sa.String(120), nullable=False),
        sa.Column("code_postal", sa.String(20), nullable=False),
        sa.Column("telephone", sa.String(40)),
        sa.Column("email", sa.String(255)),
        sa.Column("forme_juridique", sa.String(80)),
        sa.Column("date_creation", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("code_client", name="uq_clients_code_client"),
    )

    op.create_table(
        "produits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nom_produit", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("date_creation", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "taux_tva",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("taux", sa.Numeric(5, 2), nullable=False),
        sa.Column("date_debut", sa.Date()),
        sa.Column("date_fin", sa.Date()),
    )

    op.create_table(
        "catalogue",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("produit_id", sa.Integer(), sa.ForeignKey("produits.id"), nullable=False),
        sa.Column("prix_unitaire_ht", sa.Numeric(12, 2), nullable=False),
        sa.Column("taux_tva_id", sa.Integer(), sa.ForeignKey("taux_tva.id"), nullable=False),
        sa.Column("date_debut", sa.Date(), nullable=False),
        sa.Column("date_fin", sa.Date()),
    )
    op.create_index("idx_catalogue_produit_periode", "catalogue", ["produit_id", "date_debut"])

    op.create_table(
        "emetteurs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nom", sa.String(255), nullable=False),
        sa.Column("adresse", sa.Text()),
        sa.Column("ville", sa.String(120)),
        sa.Column("code_postal", sa.String(20)),
        sa.Column("telephone", sa.String(40)),
        sa.Column("web", sa.String(255)),
        sa.Column("siret", sa.String(20)),
        sa.Column("tva_intracommunautaire", sa.String(32)),
    )

    op.create_table(
        "conditions_reglement",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("libelle", sa.String(255), nullable=False),
    )

    op.create_table(
        "comptes_bancaires",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nom_banque", sa.String(255), nullable=False),
        sa.Column("nom_proprietaire", sa.String(255)),
        sa.Column("iban", sa.String(34), nullable=False),
        sa.Column("bic", sa.String(11)),
        sa.Column("date_debut", sa.Date()),
        sa.Column("date_fin", sa.Date()),
    )

    op.create_table(
        "factures",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reference", sa.String(50), nullable=False),
        sa.Column("date_facturation", sa.Date(), nullable=False),
        sa.Column("date_echeance", sa.Date(), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("emetteur_id", sa.Integer(), sa.ForeignKey("emetteurs.id"), nullable=False),
        sa.Column(
            "condition_reglement_id", sa.Integer(), sa.ForeignKey("conditions_reglement.id"), nullable=False
        ),
        sa.Column("compte_bancaire_id", sa.Integer(), sa.ForeignKey("comptes_bancaires.id"), nullable=False),
        sa.Column("total_ht", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_ttc", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("date_creation", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("reference", name="uq_factures_reference"),
    )
    op.create_index("idx_factures_date", "factures", ["date_facturation"])
    op.create_index("idx_factures_client", "factures", ["client_id"])

    op.create_table(
        "lignes_facture",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "facture_id", sa.Integer(), sa.ForeignKey("factures.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("numero_ligne", sa.Integer(), nullable=False),
        sa.Column("designation", sa.String(255), nullable=False),
        sa.Column("quantite", sa.Numeric(12, 3), nullable=False),
        sa.Column("prix_unitaire_ht", sa.Numeric(12, 2), nullable=False),
        sa.Column("taux_tva", sa.Numeric(5, 2), nullable=False),
        sa.Column("total_ht_ligne", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_tva_ligne", sa.Numeric(12, 2), nullable=False),
        sa.UniqueConstraint("facture_id", "numero_ligne", name="uq_lignes_facture_numero"),
    )


def downgrade() -> None:
    op.drop_table("lignes_facture")
    op.drop_index("idx_factures_client", table_name="factures")
    op.drop_index("idx_factures_date", table_name="factures")
    op.drop_table("factures")
    op.drop_table("comptes_bancaires")
    op.drop_table("conditions_reglement")
    op.drop_table("emetteurs")
    op.drop_index("idx_catalogue_produit_periode", table_name="catalogue")
    op.drop_table("catalogue")
    op.drop_table("taux_tva")
    op.drop_table("produits")
    op.drop_table("clients")
