"""Invoice endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, status

from backend.schemas.invoices import InvoiceCreate, InvoiceCreated, InvoiceDetail, InvoiceSummary
from backend.services import invoices as invoices_service

router = APIRouter(prefix="/factures", tags=["factures"])


@router.get("", response_model=list[InvoiceSummary])
def list_invoices(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=invoices_service.MAX_PAGE_SIZE),
    client_id: Optional[int] = Query(default=None),
):
    return invoices_service.list_invoices(page=page, limit=limit, client_id=client_id)


@router.get("/{facture_id}", response_model=InvoiceDetail)
def get_invoice(facture_id: int):
    return invoices_service.get_invoice(facture_id)


@router.post("", response_model=InvoiceCreated, status_code=status.HTTP_201_CREATED)
def create_invoice(payload: InvoiceCreate):
    created = invoices_service.create_invoice(
        reference=payload.reference,
        date_facturation=payload.date_facturation,
        date_echeance=payload.date_echeance,
        id_client=payload.id_client,
        lignes=[ligne.model_dump() for ligne in payload.lignes],
    )
    return InvoiceCreated(
        message="Facture créée avec succès",
        id_facture=created.id_facture,
        reference=created.reference,
        total_ht=float(created.total_ht),
        total_ttc=float(created.total_ttc),
    )
