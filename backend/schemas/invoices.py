"""Pydantic schemas for invoice endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class InvoiceLineCreate(BaseModel):
    id_produit: int
    quantite: Decimal = Field(..., gt=0, max_digits=12, decimal_places=3, description="Quantité facturée")


class InvoiceCreate(BaseModel):
    reference: str = Field(..., min_length=1, max_length=50)
    date_facturation: date
    date_echeance: date
    id_client: int
    lignes: List[InvoiceLineCreate] = Field(..., min_length=1, description="Au moins une ligne requise")

    @field_validator("reference", mode="before")
    def _strip_reference(cls, value):
        return value.strip() if isinstance(value, str) else value


class InvoiceCreated(BaseModel):
    message: str
    id_facture: int
    reference: str
    total_ht: float
    total_ttc: float


class InvoiceSummary(BaseModel):
    id_facture: int
    reference: str
    date_facturation: date
    date_echeance: date
    nom_client: str
    code_client: str
    total_ht: float
    total_ttc: float


class InvoiceLineOut(BaseModel):
    numero_ligne: int
    designation: str
    quantite: float
    prix_unitaire_ht: float
    taux_tva: float
    total_ht_ligne: float
    total_tva_ligne: float


class InvoiceDetail(BaseModel):
    id_facture: int
    reference: str
    date_facturation: date
    date_echeance: date
    total_ht: float
    total_ttc: float
    id_client: int
    code_client: str
    nom_client: str
    adresse_client: Optional[str] = None
    ville_client: Optional[str] = None
    code_postal_client: Optional[str] = None
    nom_emetteur: str
    adresse_emetteur: Optional[str] = None
    ville_emetteur: Optional[str] = None
    code_postal_emetteur: Optional[str] = None
    telephone_emetteur: Optional[str] = None
    web_emetteur: Optional[str] = None
    siret: Optional[str] = None
    tva_intracommunautaire: Optional[str] = None
    condition_reglement: str
    nom_banque: str
    nom_proprietaire: Optional[str] = None
    iban: str
    bic: Optional[str] = None
    lignes: List[InvoiceLineOut] = Field(default_factory=list)


__all__ = [
    "InvoiceLineCreate",
    "InvoiceCreate",
    "InvoiceCreated",
    "InvoiceSummary",
    "InvoiceLineOut",
    "InvoiceDetail",
]
