from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, status

from backend.schemas.catalog import (
    CatalogEntryOut,
    EffectivePriceOut,
    PriceCreate,
    PriceCreated,
    PriceHistoryItem,
)
from backend.services import catalog as catalog_service

router = APIRouter(prefix="/catalogue", tags=["catalogue"])


@router.get("", response_model=list[CatalogEntryOut])
def get_current_catalog():
    return catalog_service.list_current_catalog()


@router.get("/produit/{produit_id}/historique", response_model=list[PriceHistoryItem])
def get_product_history(produit_id: int):
    return catalog_service.get_product_history(produit_id)


@router.get("/produit/{produit_id}/prix", response_model=EffectivePriceOut)
def get_effective_price(
    produit_id: int,
    on_date: Optional[date] = Query(default=None, alias="date", description="Date de validité (défaut: aujourd'hui)"),
):
    return catalog_service.get_price_at(produit_id, on_date)


@router.post("/produit/{produit_id}/prix", response_model=PriceCreated, status_code=status.HTTP_201_CREATED)
def add_product_price(produit_id: int, payload: PriceCreate):
    entry_id = catalog_service.add_price(
        produit_id,
        prix_unitaire_ht=payload.prix_unitaire_ht,
        taux_tva=payload.taux_tva,
        date_debut=payload.date_debut,
    )
    return PriceCreated(message="Prix ajouté au catalogue", id_catalogue=entry_id)
