"""Pydantic schemas for reporting endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class InvoiceStatistics(BaseModel):
    annee: int
    mois: Optional[int] = None
    nombre_factures: int = Field(0, ge=0)
    total_ht: float = 0.0
    total_ttc: float = 0.0
    moyenne_ttc: Optional[float] = None


class TopClientEntry(BaseModel):
    id_client: int
    nom: str
    code_client: str
    nombre_factures: int
    chiffre_affaires: float


__all__ = ["InvoiceStatistics", "TopClientEntry"]
