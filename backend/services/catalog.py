"""Catalogue des prix : entrées datées (prix HT + taux de TVA) par produit."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.engine import Connection

from core.data_repository import get_engine, query_records
from core.repositories import SqlUnitOfWork
from backend.services.errors import DomainError, NotFoundError, ProductNotAvailableError
from backend.services.invoice_utils import to_date, to_decimal

LOGGER = logging.getLogger(__name__)


def _row_to_dict(row: Any) -> Dict[str, Any]:
    if row is None:
        return {}
    if hasattr(row, "_mapping"):
        return dict(row._mapping)
    return dict(row)


def product_exists(conn: Connection, produit_id: int) -> bool:
    row = conn.execute(
        text("SELECT id FROM produits WHERE id = :pid"),
        {"pid": produit_id},
    ).fetchone()
    return row is not None


def resolve_tax_rate_id(conn: Connection, taux: float, on_date: date) -> int:
    """Retourne l'identifiant du taux de TVA actif à la date donnée."""

    row = conn.execute(
        text(
            """
            SELECT id
            FROM taux_tva
            WHERE taux = :taux
              AND (date_fin IS NULL OR date_fin >= :on_date)
            ORDER BY id ASC
            LIMIT 1
            """
        ),
        {"taux": float(taux), "on_date": on_date.isoformat()},
    ).fetchone()
    if row is None:
        raise DomainError(f"Taux de TVA {taux} non trouvé")
    return int(row[0])


def find_effective_entry(conn: Connection, produit_id: int, on_date: date) -> dict[str, Any] | None:
    """Entrée de catalogue dont la période [date_debut, date_fin] contient ``on_date``.

    ``date_fin`` NULL signifie une période ouverte. Si plusieurs périodes se
    chevauchent, l'entrée la plus récente (date_debut la plus tardive) l'emporte.
    """

    rows = conn.execute(
        text(
            """
            SELECT
                c.id AS id_catalogue,
                c.produit_id AS id_produit,
                p.nom_produit,
                c.prix_unitaire_ht,
                t.taux AS taux_tva,
                c.date_debut,
                c.date_fin
            FROM catalogue c
            JOIN produits p ON c.produit_id = p.id
            JOIN taux_tva t ON c.taux_tva_id = t.id
            WHERE c.produit_id = :pid
              AND c.date_debut <= :on_date
              AND (c.date_fin IS NULL OR c.date_fin >= :on_date)
            ORDER BY c.date_debut DESC, c.id DESC
            """
        ),
        {"pid": produit_id, "on_date": on_date.isoformat()},
    ).fetchall()
    if not rows:
        return None
    if len(rows) > 1:
        LOGGER.warning(
            "Périodes de catalogue qui se chevauchent pour le produit %s au %s (%d entrées), entrée %s retenue",
            produit_id,
            on_date,
            len(rows),
            rows[0].id_catalogue,
        )
    record = _row_to_dict(rows[0])
    record["prix_unitaire_ht"] = to_decimal(record["prix_unitaire_ht"])
    record["taux_tva"] = to_decimal(record["taux_tva"])
    record["date_debut"] = to_date(record["date_debut"])
    record["date_fin"] = to_date(record["date_fin"])
    return record


def get_price_at(produit_id: int, on_date: date | None = None) -> dict[str, Any]:
    on_date = on_date or date.today()
    with get_engine().connect() as conn:
        if not product_exists(conn, produit_id):
            raise NotFoundError(f"Produit {produit_id} non trouvé")
        entry = find_effective_entry(conn, produit_id, on_date)
    if entry is None:
        raise ProductNotAvailableError(produit_id, on_date)
    return entry


def list_current_catalog(today: date | None = None) -> list[dict[str, Any]]:
    """Catalogue en vigueur : entrées ouvertes ou dont la fin est aujourd'hui ou plus tard."""

    sql = """
        SELECT
            c.id AS id_catalogue,
            p.id AS id_produit,
            p.nom_produit,
            p.description,
            c.prix_unitaire_ht,
            t.taux AS taux_tva,
            c.date_debut,
            c.date_fin
        FROM catalogue c
        JOIN produits p ON c.produit_id = p.id
        JOIN taux_tva t ON c.taux_tva_id = t.id
        WHERE c.date_fin IS NULL OR c.date_fin >= :today
        ORDER BY p.nom_produit, c.date_debut
    """
    return query_records(sql, params={"today": (today or date.today()).isoformat()})


def get_product_history(produit_id: int) -> list[dict[str, Any]]:
    """Historique complet des prix d'un produit, du plus récent au plus ancien."""

    with get_engine().connect() as conn:
        if not product_exists(conn, produit_id):
            raise NotFoundError(f"Produit {produit_id} non trouvé")

    sql = """
        SELECT
            c.id AS id_catalogue,
            c.prix_unitaire_ht,
            t.taux AS taux_tva,
            c.date_debut,
            c.date_fin
        FROM catalogue c
        JOIN taux_tva t ON c.taux_tva_id = t.id
        WHERE c.produit_id = :pid
        ORDER BY c.date_debut DESC, c.id DESC
    """
    return query_records(sql, params={"pid": int(produit_id)})


def add_price(produit_id: int, *, prix_unitaire_ht: float, taux_tva: float, date_debut: date) -> int:
    """Ajoute une entrée au catalogue et clôt l'entrée ouverte la veille de ``date_debut``."""

    with SqlUnitOfWork(get_engine()) as uow:
        conn = uow.connection
        if not product_exists(conn, produit_id):
            raise NotFoundError(f"Produit {produit_id} non trouvé")

        tva_id = resolve_tax_rate_id(conn, taux_tva, date_debut)

        open_entry = conn.execute(
            text(
                """
                SELECT id, date_debut
                FROM catalogue
                WHERE produit_id = :pid AND date_fin IS NULL
                ORDER BY date_debut DESC, id DESC
                LIMIT 1
                """
            ),
            {"pid": produit_id},
        ).fetchone()
        if open_entry is not None:
            open_start = to_date(open_entry.date_debut)
            if date_debut <= open_start:
                raise DomainError(
                    f"La date de début doit être postérieure au {open_start.isoformat()} (prix en vigueur)"
                )
            conn.execute(
                text("UPDATE catalogue SET date_fin = :date_fin WHERE id = :id"),
                {"date_fin": (date_debut - timedelta(days=1)).isoformat(), "id": open_entry.id},
            )

        new_id = conn.execute(
            text(
                """
                INSERT INTO catalogue (produit_id, prix_unitaire_ht, taux_tva_id, date_debut)
                VALUES (:pid, :prix, :tva_id, :date_debut)
                RETURNING id
                """
            ),
            {
                "pid": produit_id,
                "prix": float(prix_unitaire_ht),
                "tva_id": tva_id,
                "date_debut": date_debut.isoformat(),
            },
        ).scalar_one()
        uow.commit()

    LOGGER.info("Prix ajouté au catalogue du produit %s (entrée %s, début %s)", produit_id, new_id, date_debut)
    return int(new_id)
