"""Reporting aggregations over persisted invoices."""

from __future__ import annotations

from datetime import date
from typing import Any

from core.data_repository import query_df, query_records

MAX_TOP_CLIENTS = 100


def _period_bounds(annee: int, mois: int | None) -> tuple[date, date]:
    """Intervalle semi-ouvert [début, fin) couvrant l'année ou le mois demandé."""

    if mois is None:
        return date(annee, 1, 1), date(annee + 1, 1, 1)
    if not 1 <= mois <= 12:
        raise ValueError(f"Mois invalide: {mois}")
    start = date(annee, mois, 1)
    end = date(annee + 1, 1, 1) if mois == 12 else date(annee, mois + 1, 1)
    return start, end


def invoice_statistics(annee: int | None = None, mois: int | None = None) -> dict[str, Any]:
    """Nombre, sommes HT/TTC et moyenne TTC des factures de la période."""

    annee = annee or date.today().year
    start, end = _period_bounds(annee, mois)
    sql = """
        SELECT
            COUNT(*) AS nombre_factures,
            SUM(total_ht) AS total_ht,
            SUM(total_ttc) AS total_ttc,
            AVG(total_ttc) AS moyenne_ttc
        FROM factures
        WHERE date_facturation >= :start AND date_facturation < :end
    """
    df = query_df(sql, params={"start": start.isoformat(), "end": end.isoformat()})
    base = {"annee": annee, "mois": mois}
    if df.empty:
        return {**base, "nombre_factures": 0, "total_ht": 0.0, "total_ttc": 0.0, "moyenne_ttc": None}

    row = df.iloc[0]
    count = int(row.get("nombre_factures") or 0)
    moyenne = row.get("moyenne_ttc")
    return {
        **base,
        "nombre_factures": count,
        "total_ht": round(float(row.get("total_ht") or 0), 2) if count else 0.0,
        "total_ttc": round(float(row.get("total_ttc") or 0), 2) if count else 0.0,
        "moyenne_ttc": round(float(moyenne), 2) if count and moyenne is not None else None,
    }


def top_clients(limit: int = 10) -> list[dict[str, Any]]:
    """Clients classés par chiffre d'affaires TTC décroissant."""

    limit = max(1, min(int(limit), MAX_TOP_CLIENTS))
    sql = """
        SELECT
            c.id AS id_client,
            c.nom,
            c.code_client,
            COUNT(f.id) AS nombre_factures,
            SUM(f.total_ttc) AS chiffre_affaires
        FROM clients c
        JOIN factures f ON c.id = f.client_id
        GROUP BY c.id, c.nom, c.code_client
        ORDER BY chiffre_affaires DESC, c.id ASC
        LIMIT :limit
    """
    return query_records(sql, params={"limit": limit})
