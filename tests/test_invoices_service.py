from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select

from core import schema
from core.settings import AppSettings
from backend.services import invoices as invoices_service
from backend.services.errors import (
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ProductNotAvailableError,
)
from tests.sample_data import (
    ACTIVE_ACCOUNT_ID,
    CLIENT_ACME,
    CLIENT_BETA,
    PRODUCT_CONSEIL,
    PRODUCT_FORMATION,
    PRODUCT_LIVRE,
    PRODUCT_SANS_PRIX,
    count_rows,
    insert_bulk_invoices,
)

NO_OVERRIDES = AppSettings()


def _create(reference="FAC-2024-001", *, lignes=None, id_client=CLIENT_ACME, on=date(2024, 3, 15), settings=NO_OVERRIDES):
    return invoices_service.create_invoice(
        reference=reference,
        date_facturation=on,
        date_echeance=date(2024, 4, 14),
        id_client=id_client,
        lignes=lignes
        or [
            {"id_produit": PRODUCT_CONSEIL, "quantite": Decimal("2")},
            {"id_produit": PRODUCT_FORMATION, "quantite": Decimal("1.5")},
        ],
        settings=settings,
    )


def test_create_invoice_computes_totals_from_catalog(seeded):
    created = _create()

    assert created.reference == "FAC-2024-001"
    assert created.total_ht == Decimal("875.75")
    assert created.total_ttc == Decimal("1050.90")

    invoice = invoices_service.get_invoice(created.id_facture)
    assert invoice["total_ht"] == pytest.approx(875.75)
    assert invoice["total_ttc"] == pytest.approx(1050.90)
    assert invoice["iban"] == "FR7600000000000000000000002"
    assert invoice["bic"] == "BANKFRPP"
    assert invoice["nom_proprietaire"] == "Okayo SAS"
    assert [ligne["numero_ligne"] for ligne in invoice["lignes"]] == [1, 2]
    first, second = invoice["lignes"]
    assert first["designation"] == "Conseil"
    assert first["prix_unitaire_ht"] == pytest.approx(100.0)
    assert first["total_tva_ligne"] == pytest.approx(40.0)
    assert second["designation"] == "Formation"
    assert second["total_ht_ligne"] == pytest.approx(675.75)
    assert second["total_tva_ligne"] == pytest.approx(135.15)


def test_create_invoice_uses_price_effective_on_invoice_date(seeded):
    before = _create("FAC-A", lignes=[{"id_produit": PRODUCT_CONSEIL, "quantite": 1}], on=date(2024, 6, 30))
    after = _create("FAC-B", lignes=[{"id_produit": PRODUCT_CONSEIL, "quantite": 1}], on=date(2024, 7, 1))

    assert before.total_ht == Decimal("100.00")
    assert after.total_ht == Decimal("120.00")


def test_create_invoice_with_reduced_rate(seeded):
    created = _create(
        "FAC-LIVRE",
        lignes=[{"id_produit": PRODUCT_LIVRE, "quantite": 3}],
        on=date(2025, 2, 1),
    )

    assert created.total_ht == Decimal("75.00")
    # 75.00 * 5.5 % = 4.125 -> 4.13
    assert created.total_ttc == Decimal("79.13")


def test_duplicate_reference_is_a_conflict_and_writes_nothing(seeded):
    _create()
    lines_before = count_rows(seeded, schema.lignes_facture)

    with pytest.raises(ConflictError) as excinfo:
        _create(id_client=CLIENT_BETA)

    assert excinfo.value.status_code == 409
    assert count_rows(seeded, schema.factures) == 1
    assert count_rows(seeded, schema.lignes_facture) == lines_before


def test_unavailable_product_rolls_back_header_and_previous_lines(seeded):
    with pytest.raises(ProductNotAvailableError) as excinfo:
        _create(
            lignes=[
                {"id_produit": PRODUCT_CONSEIL, "quantite": 1},
                {"id_produit": PRODUCT_FORMATION, "quantite": 1},
                {"id_produit": PRODUCT_SANS_PRIX, "quantite": 1},
            ]
        )

    assert excinfo.value.status_code == 400
    assert excinfo.value.produit_id == PRODUCT_SANS_PRIX
    assert count_rows(seeded, schema.factures) == 0
    assert count_rows(seeded, schema.lignes_facture) == 0


def test_product_not_yet_in_catalog_on_invoice_date(seeded):
    with pytest.raises(ProductNotAvailableError):
        _create(lignes=[{"id_produit": PRODUCT_LIVRE, "quantite": 1}], on=date(2024, 12, 31))

    assert count_rows(seeded, schema.factures) == 0


def test_unknown_product_is_reported_as_unavailable(seeded):
    with pytest.raises(ProductNotAvailableError):
        _create(lignes=[{"id_produit": 999, "quantite": 1}])


def test_unknown_client_is_not_found(seeded):
    with pytest.raises(NotFoundError):
        _create(id_client=404)

    assert count_rows(seeded, schema.factures) == 0


def test_empty_lines_are_rejected(seeded):
    with pytest.raises(DomainError):
        invoices_service.create_invoice(
            reference="FAC-VIDE",
            date_facturation=date(2024, 3, 15),
            date_echeance=date(2024, 4, 14),
            id_client=CLIENT_ACME,
            lignes=[],
            settings=NO_OVERRIDES,
        )


def test_ambiguous_issuer_is_an_internal_error(seeded):
    with seeded.begin() as conn:
        conn.execute(schema.emetteurs.insert(), [{"id": 2, "nom": "Filiale"}])

    with pytest.raises(InternalError, match="DEFAULT_EMETTEUR_ID"):
        _create()

    assert count_rows(seeded, schema.factures) == 0


def test_missing_active_bank_account_is_an_internal_error(seeded):
    with seeded.begin() as conn:
        conn.execute(
            schema.comptes_bancaires.update()
            .where(schema.comptes_bancaires.c.id == ACTIVE_ACCOUNT_ID)
            .values(date_fin=date(2024, 12, 31))
        )

    with pytest.raises(InternalError):
        _create()

    assert count_rows(seeded, schema.factures) == 0


def test_configured_default_wins_over_candidates(seeded):
    with seeded.begin() as conn:
        conn.execute(
            schema.comptes_bancaires.insert(),
            [{"id": 3, "nom_banque": "Banque Pro", "iban": "FR7600000000000000000000003", "date_fin": None}],
        )

    with pytest.raises(InternalError):
        _create("FAC-AMBIGU")

    created = _create(settings=AppSettings(default_compte_bancaire_id=3))

    with seeded.connect() as conn:
        account_id = conn.execute(
            select(schema.factures.c.compte_bancaire_id).where(schema.factures.c.id == created.id_facture)
        ).scalar_one()
    assert account_id == 3


def test_configured_default_must_be_active(seeded):
    with pytest.raises(InternalError, match="DEFAULT_COMPTE_BANCAIRE_ID"):
        _create(settings=AppSettings(default_compte_bancaire_id=1))


def test_list_invoices_paginates_newest_first(seeded):
    insert_bulk_invoices(seeded, 45)

    first_page = invoices_service.list_invoices(page=1, limit=20)
    second_page = invoices_service.list_invoices(page=2, limit=20)
    last_page = invoices_service.list_invoices(page=3, limit=20)
    beyond = invoices_service.list_invoices(page=4, limit=20)

    assert [row["reference"] for row in first_page][:2] == ["F-044", "F-043"]
    assert [row["reference"] for row in second_page] == [f"F-{index:03d}" for index in range(24, 4, -1)]
    assert len(last_page) == 5
    assert beyond == []


def test_list_invoices_filters_by_client(seeded):
    insert_bulk_invoices(seeded, 6)

    rows = invoices_service.list_invoices(client_id=CLIENT_BETA)

    assert [row["reference"] for row in rows] == ["F-005", "F-003", "F-001"]
    assert {row["code_client"] for row in rows} == {"CLI-BETA"}


def test_list_invoices_clamps_page_size(seeded):
    insert_bulk_invoices(seeded, 120)

    assert len(invoices_service.list_invoices(limit=500)) == invoices_service.MAX_PAGE_SIZE


def test_get_invoice_unknown_is_not_found(seeded):
    with pytest.raises(NotFoundError):
        invoices_service.get_invoice(12345)


@pytest.mark.parametrize("quantite", [Decimal("0.0005"), Decimal("0"), Decimal("-1")])
def test_quantity_outside_stored_precision_is_rejected(seeded, quantite):
    with pytest.raises(DomainError, match="Quantité invalide ligne 2"):
        _create(
            lignes=[
                {"id_produit": PRODUCT_CONSEIL, "quantite": Decimal("1")},
                {"id_produit": PRODUCT_FORMATION, "quantite": quantite},
            ]
        )

    assert count_rows(seeded, schema.factures) == 0


def test_three_decimal_quantity_is_accepted(seeded):
    created = _create(lignes=[{"id_produit": PRODUCT_FORMATION, "quantite": Decimal("0.125")}])

    # 0.125 * 450.50 = 56.3125
    assert created.total_ht == Decimal("56.31")
