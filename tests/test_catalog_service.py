from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from core import schema
from backend.services import catalog as catalog_service
from backend.services.errors import DomainError, NotFoundError, ProductNotAvailableError
from tests.sample_data import (
    PRODUCT_CONSEIL,
    PRODUCT_FORMATION,
    PRODUCT_LIVRE,
    PRODUCT_SANS_PRIX,
    count_rows,
)


def _price_on(engine, produit_id, on_date):
    with engine.connect() as conn:
        return catalog_service.find_effective_entry(conn, produit_id, on_date)


@pytest.mark.parametrize(
    "on_date, expected",
    [
        (date(2024, 1, 1), Decimal("100")),
        (date(2024, 6, 30), Decimal("100")),
        (date(2024, 7, 1), Decimal("120")),
        (date(2030, 1, 1), Decimal("120")),
    ],
)
def test_effective_entry_respects_inclusive_bounds(seeded, on_date, expected):
    entry = _price_on(seeded, PRODUCT_CONSEIL, on_date)

    assert entry["prix_unitaire_ht"] == expected
    assert entry["taux_tva"] == Decimal("20")
    assert entry["nom_produit"] == "Conseil"


def test_effective_entry_outside_any_period(seeded):
    assert _price_on(seeded, PRODUCT_CONSEIL, date(2023, 12, 31)) is None
    assert _price_on(seeded, PRODUCT_SANS_PRIX, date(2024, 3, 1)) is None


def test_overlapping_periods_pick_latest_start(seeded, caplog):
    with seeded.begin() as conn:
        conn.execute(
            schema.catalogue.insert(),
            [
                {
                    "produit_id": PRODUCT_FORMATION,
                    "prix_unitaire_ht": 500,
                    "taux_tva_id": 1,
                    "date_debut": date(2024, 3, 1),
                    "date_fin": None,
                }
            ],
        )

    with caplog.at_level("WARNING"):
        entry = _price_on(seeded, PRODUCT_FORMATION, date(2024, 3, 15))

    assert entry["prix_unitaire_ht"] == Decimal("500")
    assert entry["date_debut"] == date(2024, 3, 1)
    assert "chevauchent" in caplog.text
    assert _price_on(seeded, PRODUCT_FORMATION, date(2024, 2, 1))["prix_unitaire_ht"] == Decimal("450.5")


def test_get_price_at_errors(seeded):
    with pytest.raises(NotFoundError):
        catalog_service.get_price_at(999, date(2024, 3, 1))
    with pytest.raises(ProductNotAvailableError):
        catalog_service.get_price_at(PRODUCT_LIVRE, date(2024, 3, 1))

    assert catalog_service.get_price_at(PRODUCT_LIVRE, date(2025, 3, 1))["taux_tva"] == Decimal("5.5")


def test_current_catalog_hides_closed_entries(seeded):
    rows = catalog_service.list_current_catalog(today=date(2025, 6, 1))

    assert [(row["nom_produit"], row["prix_unitaire_ht"]) for row in rows] == [
        ("Conseil", 120.0),
        ("Formation", 450.5),
        ("Livre", 25.0),
    ]


def test_current_catalog_keeps_entry_ending_today(seeded):
    rows = catalog_service.list_current_catalog(today=date(2024, 6, 30))

    conseil = [row["prix_unitaire_ht"] for row in rows if row["id_produit"] == PRODUCT_CONSEIL]
    assert conseil == [100.0, 120.0]


def test_product_history_newest_first(seeded):
    history = catalog_service.get_product_history(PRODUCT_CONSEIL)

    assert [row["prix_unitaire_ht"] for row in history] == [120.0, 100.0]
    assert history[0]["date_fin"] is None
    assert catalog_service.get_product_history(PRODUCT_SANS_PRIX) == []


def test_product_history_unknown_product(seeded):
    with pytest.raises(NotFoundError):
        catalog_service.get_product_history(999)


def test_add_price_closes_open_entry(seeded):
    entry_id = catalog_service.add_price(
        PRODUCT_FORMATION,
        prix_unitaire_ht=480,
        taux_tva=20,
        date_debut=date(2025, 1, 1),
    )

    history = catalog_service.get_product_history(PRODUCT_FORMATION)
    assert history[0]["id_catalogue"] == entry_id
    assert history[0]["date_fin"] is None
    assert str(history[1]["date_fin"]) == "2024-12-31"

    assert _price_on(seeded, PRODUCT_FORMATION, date(2024, 12, 31))["prix_unitaire_ht"] == Decimal("450.5")
    assert _price_on(seeded, PRODUCT_FORMATION, date(2025, 1, 1))["prix_unitaire_ht"] == Decimal("480")


def test_add_price_rejects_start_not_after_current(seeded):
    with pytest.raises(DomainError):
        catalog_service.add_price(
            PRODUCT_CONSEIL,
            prix_unitaire_ht=130,
            taux_tva=20,
            date_debut=date(2024, 7, 1),
        )

    assert count_rows(seeded, schema.catalogue) == 4


def test_add_price_unknown_rate(seeded):
    with pytest.raises(DomainError, match="Taux de TVA"):
        catalog_service.add_price(
            PRODUCT_SANS_PRIX,
            prix_unitaire_ht=10,
            taux_tva=7,
            date_debut=date(2025, 1, 1),
        )
