from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import text

from core.data_repository import get_engine, query_records
from core.repositories import SqlUnitOfWork
from backend.services.catalog import resolve_tax_rate_id
from backend.services.errors import NotFoundError

LOGGER = logging.getLogger(__name__)

PRODUCT_COLUMNS = "id, nom_produit, description, date_creation"


def list_products() -> list[dict[str, Any]]:
    return query_records(f"SELECT {PRODUCT_COLUMNS} FROM produits ORDER BY nom_produit, id")


def get_product(produit_id: int) -> dict[str, Any]:
    records = query_records(
        f"SELECT {PRODUCT_COLUMNS} FROM produits WHERE id = :pid",
        params={"pid": int(produit_id)},
    )
    if not records:
        raise NotFoundError(f"Produit {produit_id} non trouvé")
    return records[0]


def create_product(
    *,
    nom_produit: str,
    description: str | None,
    prix_unitaire_ht: float,
    taux_tva: float,
    today: date | None = None,
) -> int:
    """Crée le produit et son premier prix au catalogue (à partir d'aujourd'hui) dans une seule transaction."""

    start = today or date.today()
    with SqlUnitOfWork(get_engine()) as uow:
        produit_id = uow.execute(
            text(
                """
                INSERT INTO produits (nom_produit, description)
                VALUES (:nom_produit, :description)
                RETURNING id
                """
            ),
            {"nom_produit": nom_produit, "description": description},
        ).scalar_one()

        tva_id = resolve_tax_rate_id(uow.connection, taux_tva, start)

        uow.execute(
            text(
                """
                INSERT INTO catalogue (produit_id, prix_unitaire_ht, taux_tva_id, date_debut)
                VALUES (:pid, :prix, :tva_id, :date_debut)
                """
            ),
            {
                "pid": produit_id,
                "prix": float(prix_unitaire_ht),
                "tva_id": tva_id,
                "date_debut": start.isoformat(),
            },
        )
        uow.commit()

    LOGGER.info("Produit %s créé (%s)", produit_id, nom_produit)
    return int(produit_id)
