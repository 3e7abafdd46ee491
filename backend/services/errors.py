"""Exceptions métier partagées par les services de facturation.

Chaque exception porte le code HTTP et le libellé ``error`` renvoyés par
``backend.middleware.error_handler``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import IntegrityError


class ServiceError(Exception):
    """Exception de base des services."""

    status_code = 500
    label = "Erreur interne du serveur"

    def __init__(self, message: str, *, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else message


class NotFoundError(ServiceError):
    """Levée lorsqu'une entité référencée (client, facture, produit) est absente."""

    status_code = 404
    label = "Ressource non trouvée"


class ConflictError(ServiceError):
    """Violation d'unicité sur une clé naturelle (code client, référence de facture)."""

    status_code = 409
    label = "Conflit - Données déjà existantes"


class DomainError(ServiceError):
    """Règle métier non respectée (produit indisponible à la date, taux de TVA inconnu...)."""

    status_code = 400
    label = "Règle métier non respectée"


class InternalError(ServiceError):
    """Erreur d'état ou de configuration sans reprise possible côté appelant."""


class ProductNotAvailableError(DomainError):
    def __init__(self, produit_id: int, on_date):
        super().__init__(f"Produit {produit_id} non disponible à la date du {on_date}")
        self.produit_id = produit_id
        self.on_date = on_date


def is_unique_violation(exc: IntegrityError) -> bool:
    """Distingue une violation d'unicité des autres violations d'intégrité (clé étrangère...)."""

    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":  # unique_violation (PostgreSQL)
        return True
    message = str(orig or exc).lower()
    return "unique" in message or "duplicate" in message


__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "DomainError",
    "InternalError",
    "ProductNotAvailableError",
    "is_unique_violation",
]
