"""Factures : création transactionnelle (en-tête + lignes + totaux) et consultation.

La création d'une facture est l'unique opération multi-étapes du système :
tout ce qui est écrit entre l'ouverture de la transaction et le commit
(en-tête, lignes, mise à jour des totaux) est annulé au moindre échec.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.data_repository import get_engine, query_records
from core.repositories import SqlUnitOfWork
from core.settings import AppSettings
from backend.services.catalog import find_effective_entry
from backend.services.errors import (
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ProductNotAvailableError,
    ServiceError,
    is_unique_violation,
)
from backend.services.invoice_utils import (
    LineAmounts,
    compute_line_amounts,
    is_valid_quantity,
    sum_invoice_totals,
)

LOGGER = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class InvoiceDefaults:
    """Émetteur, condition de règlement et compte bancaire appliqués à toute nouvelle facture."""

    emetteur_id: int
    condition_reglement_id: int
    compte_bancaire_id: int


@dataclass(frozen=True)
class CreatedInvoice:
    id_facture: int
    reference: str
    total_ht: Decimal
    total_ttc: Decimal


def _resolve_default(
    conn: Connection,
    *,
    table: str,
    label: str,
    env_name: str,
    configured_id: int | None,
    condition: str | None = None,
) -> int:
    """Sélectionne l'enregistrement par défaut d'une table de référence.

    Un identifiant configuré l'emporte et doit exister. Sinon un seul candidat
    est accepté : zéro ou plusieurs candidats sont une erreur de configuration.
    """

    where = f"WHERE {condition}" if condition else ""
    if configured_id is not None:
        filters = f"{where} AND id = :id" if where else "WHERE id = :id"
        row = conn.execute(text(f"SELECT id FROM {table} {filters}"), {"id": configured_id}).fetchone()
        if row is None:
            raise InternalError(f"{label} configuré ({env_name}={configured_id}) introuvable ou inactif")
        return int(row[0])

    rows = conn.execute(text(f"SELECT id FROM {table} {where} ORDER BY id ASC LIMIT 2")).fetchall()
    if not rows:
        raise InternalError(f"Aucun {label} disponible pour la facturation")
    if len(rows) > 1:
        raise InternalError(f"Plusieurs {label} candidats : définir {env_name} pour choisir le défaut")
    return int(rows[0][0])


def resolve_invoice_defaults(conn: Connection, settings: AppSettings | None = None) -> InvoiceDefaults:
    settings = settings or AppSettings.load()
    return InvoiceDefaults(
        emetteur_id=_resolve_default(
            conn,
            table="emetteurs",
            label="émetteur",
            env_name="DEFAULT_EMETTEUR_ID",
            configured_id=settings.default_emetteur_id,
        ),
        condition_reglement_id=_resolve_default(
            conn,
            table="conditions_reglement",
            label="condition de règlement",
            env_name="DEFAULT_CONDITION_REGLEMENT_ID",
            configured_id=settings.default_condition_reglement_id,
        ),
        compte_bancaire_id=_resolve_default(
            conn,
            table="comptes_bancaires",
            label="compte bancaire actif",
            env_name="DEFAULT_COMPTE_BANCAIRE_ID",
            configured_id=settings.default_compte_bancaire_id,
            condition="date_fin IS NULL",
        ),
    )


def _insert_header(
    conn: Connection,
    *,
    reference: str,
    date_facturation: date,
    date_echeance: date,
    client_id: int,
    defaults: InvoiceDefaults,
) -> int:
    try:
        return int(
            conn.execute(
                text(
                    """
                    INSERT INTO factures
                    (reference, date_facturation, date_echeance, client_id,
                     emetteur_id, condition_reglement_id, compte_bancaire_id, total_ht, total_ttc)
                    VALUES (:reference, :date_facturation, :date_echeance, :client_id,
                            :emetteur_id, :condition_reglement_id, :compte_bancaire_id, 0, 0)
                    RETURNING id
                    """
                ),
                {
                    "reference": reference,
                    "date_facturation": date_facturation.isoformat(),
                    "date_echeance": date_echeance.isoformat(),
                    "client_id": client_id,
                    "emetteur_id": defaults.emetteur_id,
                    "condition_reglement_id": defaults.condition_reglement_id,
                    "compte_bancaire_id": defaults.compte_bancaire_id,
                },
            ).scalar_one()
        )
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise ConflictError("Référence de facture déjà existante", details=f"reference={reference}") from exc
        raise


def _insert_line(
    conn: Connection,
    *,
    facture_id: int,
    numero_ligne: int,
    produit_id: int,
    quantite: Any,
    date_facturation: date,
) -> LineAmounts:
    entry = find_effective_entry(conn, produit_id, date_facturation)
    if entry is None:
        raise ProductNotAvailableError(produit_id, date_facturation)

    amounts = compute_line_amounts(quantite, entry["prix_unitaire_ht"], entry["taux_tva"])
    conn.execute(
        text(
            """
            INSERT INTO lignes_facture
            (facture_id, numero_ligne, designation, quantite, prix_unitaire_ht, taux_tva,
             total_ht_ligne, total_tva_ligne)
            VALUES (:facture_id, :numero_ligne, :designation, :quantite, :prix_unitaire_ht, :taux_tva,
                    :total_ht_ligne, :total_tva_ligne)
            """
        ),
        {
            "facture_id": facture_id,
            "numero_ligne": numero_ligne,
            "designation": entry["nom_produit"],
            "quantite": float(quantite),
            "prix_unitaire_ht": float(entry["prix_unitaire_ht"]),
            "taux_tva": float(entry["taux_tva"]),
            "total_ht_ligne": float(amounts.total_ht_ligne),
            "total_tva_ligne": float(amounts.total_tva_ligne),
        },
    )
    return amounts


def create_invoice(
    *,
    reference: str,
    date_facturation: date,
    date_echeance: date,
    id_client: int,
    lignes: Sequence[Mapping[str, Any]],
    settings: AppSettings | None = None,
) -> CreatedInvoice:
    """Crée une facture et ses lignes dans une seule transaction.

    Les prix et taux sont recopiés depuis l'entrée de catalogue en vigueur à
    ``date_facturation``. Les totaux de l'en-tête sont calculés une fois toutes
    les lignes insérées, avant le commit.

    Raises:
        NotFoundError: client inexistant.
        ConflictError: référence déjà utilisée.
        DomainError: aucune ligne, ou quantité hors format.
        ProductNotAvailableError: un produit n'a pas de prix valide à la date.
        InternalError: défauts de facturation absents/ambigus ou erreur base.
    """

    if not lignes:
        raise DomainError("Au moins une ligne requise")
    for numero, ligne in enumerate(lignes, start=1):
        if not is_valid_quantity(ligne["quantite"]):
            raise DomainError(
                f"Quantité invalide ligne {numero}: {ligne['quantite']} (positive, 3 décimales au plus)"
            )

    try:
        with SqlUnitOfWork(get_engine()) as uow:
            conn = uow.connection

            client = conn.execute(text("SELECT id FROM clients WHERE id = :cid"), {"cid": id_client}).fetchone()
            if client is None:
                raise NotFoundError(f"Client {id_client} non trouvé")

            defaults = resolve_invoice_defaults(conn, settings)
            facture_id = _insert_header(
                conn,
                reference=reference,
                date_facturation=date_facturation,
                date_echeance=date_echeance,
                client_id=id_client,
                defaults=defaults,
            )

            amounts = [
                _insert_line(
                    conn,
                    facture_id=facture_id,
                    numero_ligne=numero,
                    produit_id=int(ligne["id_produit"]),
                    quantite=ligne["quantite"],
                    date_facturation=date_facturation,
                )
                for numero, ligne in enumerate(lignes, start=1)
            ]

            totals = sum_invoice_totals(amounts)
            conn.execute(
                text("UPDATE factures SET total_ht = :total_ht, total_ttc = :total_ttc WHERE id = :id"),
                {"total_ht": float(totals.total_ht), "total_ttc": float(totals.total_ttc), "id": facture_id},
            )
            uow.commit()
    except InternalError:
        LOGGER.exception("Création de la facture %s impossible", reference)
        raise
    except ServiceError as exc:
        LOGGER.warning("Facture %s refusée: %s", reference, exc.message)
        raise
    except SQLAlchemyError as exc:
        LOGGER.exception("Erreur base lors de la création de la facture %s", reference)
        raise InternalError("Erreur lors de la création de la facture", details=str(exc.__class__.__name__)) from exc

    LOGGER.info(
        "Facture %s créée (id %s, %d ligne(s), total TTC %s)",
        reference,
        facture_id,
        len(amounts),
        totals.total_ttc,
    )
    return CreatedInvoice(
        id_facture=facture_id,
        reference=reference,
        total_ht=totals.total_ht,
        total_ttc=totals.total_ttc,
    )


def list_invoices(*, page: int = 1, limit: int = 20, client_id: int | None = None) -> list[dict[str, Any]]:
    """Factures paginées, les plus récentes d'abord ; une page au-delà des données est vide."""

    page = max(1, int(page))
    limit = max(1, min(int(limit), MAX_PAGE_SIZE))
    offset = (page - 1) * limit

    where_sql = ""
    params: dict[str, Any] = {"limit": limit, "offset": offset}
    if client_id is not None:
        where_sql = "WHERE f.client_id = :client_id"
        params["client_id"] = int(client_id)

    sql = f"""
        SELECT
            f.id AS id_facture,
            f.reference,
            f.date_facturation,
            f.date_echeance,
            c.nom AS nom_client,
            c.code_client,
            f.total_ht,
            f.total_ttc
        FROM factures f
        JOIN clients c ON f.client_id = c.id
        {where_sql}
        ORDER BY f.date_facturation DESC, f.id DESC
        LIMIT :limit OFFSET :offset
    """
    return query_records(sql, params=params)


def get_invoice(facture_id: int) -> dict[str, Any]:
    """En-tête complet (client, émetteur, règlement, banque) et lignes ordonnées."""

    headers = query_records(
        """
        SELECT
            f.id AS id_facture,
            f.reference,
            f.date_facturation,
            f.date_echeance,
            f.total_ht,
            f.total_ttc,
            f.client_id AS id_client,
            c.code_client,
            c.nom AS nom_client,
            c.adresse AS adresse_client,
            c.ville AS ville_client,
            c.code_postal AS code_postal_client,
            e.nom AS nom_emetteur,
            e.adresse AS adresse_emetteur,
            e.ville AS ville_emetteur,
            e.code_postal AS code_postal_emetteur,
            e.telephone AS telephone_emetteur,
            e.web AS web_emetteur,
            e.siret,
            e.tva_intracommunautaire,
            cr.libelle AS condition_reglement,
            cb.nom_banque,
            cb.nom_proprietaire,
            cb.iban,
            cb.bic
        FROM factures f
        JOIN clients c ON f.client_id = c.id
        JOIN emetteurs e ON f.emetteur_id = e.id
        JOIN conditions_reglement cr ON f.condition_reglement_id = cr.id
        JOIN comptes_bancaires cb ON f.compte_bancaire_id = cb.id
        WHERE f.id = :fid
        """,
        params={"fid": int(facture_id)},
    )
    if not headers:
        raise NotFoundError(f"Facture {facture_id} non trouvée")

    invoice = headers[0]
    invoice["lignes"] = query_records(
        """
        SELECT
            numero_ligne,
            designation,
            quantite,
            prix_unitaire_ht,
            taux_tva,
            total_ht_ligne,
            total_tva_ligne
        FROM lignes_facture
        WHERE facture_id = :fid
        ORDER BY numero_ligne
        """,
        params={"fid": int(facture_id)},
    )
    return invoice
