"""Shared helpers for invoice amount computation and value normalization."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

CENT = Decimal("0.01")
QUANTITY_STEP = Decimal("0.001")


def to_decimal(value: Any) -> Decimal:
    """Convertit une valeur SQL (float, int, str, Decimal) en Decimal exact."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_date(value: Any) -> date | None:
    """Normalise une date SQL (objet date ou chaîne ISO renvoyée par SQLite)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def is_valid_quantity(value: Any) -> bool:
    """Quantité strictement positive, au plus trois décimales (colonne NUMERIC(12, 3))."""
    quantity = to_decimal(value)
    return quantity > 0 and quantity == quantity.quantize(QUANTITY_STEP)


@dataclass(frozen=True)
class LineAmounts:
    total_ht_ligne: Decimal
    total_tva_ligne: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    total_ht: Decimal
    total_tva: Decimal

    @property
    def total_ttc(self) -> Decimal:
        return self.total_ht + self.total_tva


def compute_line_amounts(quantite: Any, prix_unitaire_ht: Any, taux_tva: Any) -> LineAmounts:
    """Montants d'une ligne : HT = quantité x PU HT, TVA = HT x taux / 100 (arrondis au centime)."""
    total_ht = round_money(to_decimal(quantite) * to_decimal(prix_unitaire_ht))
    total_tva = round_money(total_ht * to_decimal(taux_tva) / Decimal(100))
    return LineAmounts(total_ht_ligne=total_ht, total_tva_ligne=total_tva)


def sum_invoice_totals(lines: Iterable[LineAmounts]) -> InvoiceTotals:
    total_ht = Decimal("0.00")
    total_tva = Decimal("0.00")
    for line in lines:
        total_ht += line.total_ht_ligne
        total_tva += line.total_tva_ligne
    return InvoiceTotals(total_ht=total_ht, total_tva=total_tva)
