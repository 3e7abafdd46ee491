"""Pydantic schemas for catalogue (dated prices) endpoints."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class CatalogEntryOut(BaseModel):
    id_catalogue: int
    id_produit: int
    nom_produit: str
    description: Optional[str] = None
    prix_unitaire_ht: float
    taux_tva: float
    date_debut: date
    date_fin: Optional[date] = None


class PriceHistoryItem(BaseModel):
    id_catalogue: int
    prix_unitaire_ht: float
    taux_tva: float
    date_debut: date
    date_fin: Optional[date] = None


class EffectivePriceOut(BaseModel):
    """Entrée de catalogue en vigueur à une date donnée."""

    id_catalogue: int
    id_produit: int
    nom_produit: str
    prix_unitaire_ht: float
    taux_tva: float
    date_debut: date
    date_fin: Optional[date] = None


class PriceCreate(BaseModel):
    prix_unitaire_ht: float = Field(..., ge=0)
    taux_tva: float = Field(..., ge=0, le=100)
    date_debut: date


class PriceCreated(BaseModel):
    message: str
    id_catalogue: int


__all__ = [
    "CatalogEntryOut",
    "PriceHistoryItem",
    "EffectivePriceOut",
    "PriceCreate",
    "PriceCreated",
]
