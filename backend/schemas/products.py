"""Pydantic schemas for product endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProductCreate(BaseModel):
    nom_produit: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    prix_unitaire_ht: float = Field(..., ge=0)
    taux_tva: float = Field(..., ge=0, le=100)

    @field_validator("nom_produit", mode="before")
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class ProductOut(BaseModel):
    id: int
    nom_produit: str
    description: Optional[str] = None
    date_creation: Optional[datetime] = None


class ProductCreated(BaseModel):
    message: str
    id_produit: int


__all__ = ["ProductCreate", "ProductOut", "ProductCreated"]
