"""Reporting endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from backend.schemas.statistics import InvoiceStatistics, TopClientEntry
from backend.services import statistics as statistics_service

router = APIRouter(prefix="/statistiques", tags=["statistiques"])


@router.get("/factures", response_model=InvoiceStatistics)
def get_invoice_statistics(
    annee: Optional[int] = Query(default=None, ge=1900, le=9999),
    mois: Optional[int] = Query(default=None, ge=1, le=12),
):
    """Aggregated invoice figures for a year, optionally narrowed to one month."""

    return statistics_service.invoice_statistics(annee, mois)


@router.get("/top-clients", response_model=list[TopClientEntry])
def get_top_clients(limit: int = Query(default=10, ge=1, le=statistics_service.MAX_TOP_CLIENTS)):
    return statistics_service.top_clients(limit)
