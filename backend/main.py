"""FastAPI application exposing the invoicing features (clients, catalogue, factures)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api import catalog as catalog_router
from backend.api import clients as clients_router
from backend.api import invoices as invoices_router
from backend.api import products as products_router
from backend.api import statistics as statistics_router
from backend.middleware import register_error_handlers
from backend.schemas.common import ERROR_RESPONSES
from backend.settings import Settings
from core.data_repository import get_engine
from core.schema import bootstrap_schema

LOGGER = logging.getLogger(__name__)

API_TITLE = "API Gestion Factures"
API_VERSION = "1.0.0"

API_DOCUMENTATION = {
    "title": API_TITLE,
    "version": API_VERSION,
    "description": "API pour la gestion des factures, clients, produits et statistiques",
    "endpoints": {
        "clients": {
            "GET /clients": "Liste des clients",
            "GET /clients/{id}": "Détail d'un client",
            "POST /clients": "Créer un client",
        },
        "produits": {
            "GET /produits": "Liste des produits",
            "GET /produits/{id}": "Détail d'un produit",
            "POST /produits": "Créer un produit (et son prix au catalogue)",
        },
        "catalogue": {
            "GET /catalogue": "Catalogue actuel",
            "GET /catalogue/produit/{id}/historique": "Historique des prix d'un produit",
            "GET /catalogue/produit/{id}/prix?date=": "Prix en vigueur à une date",
            "POST /catalogue/produit/{id}/prix": "Nouveau prix (clôt le prix en vigueur)",
        },
        "factures": {
            "GET /factures?page=&limit=&client_id=": "Liste des factures (avec pagination)",
            "GET /factures/{id}": "Détail d'une facture",
            "POST /factures": "Créer une facture",
        },
        "statistiques": {
            "GET /statistiques/factures?annee=&mois=": "Statistiques des factures",
            "GET /statistiques/top-clients?limit=": "Top clients par CA",
        },
        "technique": {
            "GET /health": "État du service",
            "GET /swagger": "Documentation OpenAPI interactive",
        },
    },
}


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@lru_cache
def create_app() -> FastAPI:
    """Construit l'application FastAPI ainsi que tous les routeurs de domaine."""

    settings = Settings.load()
    _configure_logging(settings.log_level)

    app = FastAPI(
        title=API_TITLE,
        version=API_VERSION,
        description="""
## API de facturation

- **Clients** : consultation et création
- **Produits / Catalogue** : prix HT et TVA datés, historique
- **Factures** : création transactionnelle avec calcul des totaux, consultation paginée
- **Statistiques** : chiffres par période, meilleurs clients
        """,
        openapi_tags=[
            {"name": "clients", "description": "Clients facturés"},
            {"name": "produits", "description": "Produits vendus"},
            {"name": "catalogue", "description": "Prix et TVA datés par produit"},
            {"name": "factures", "description": "Factures et lignes"},
            {"name": "statistiques", "description": "Indicateurs de facturation"},
        ],
        # /docs renvoie la description statique de l'API.
        docs_url="/swagger",
        redoc_url="/redoc",
    )

    if not settings.skip_schema_init:
        bootstrap_schema(get_engine())

    allowed_origins = settings.cors_allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials="*" not in allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, expose_internal_details=settings.is_development)

    app.include_router(clients_router.router, responses=ERROR_RESPONSES)
    app.include_router(products_router.router, responses=ERROR_RESPONSES)
    app.include_router(catalog_router.router, responses=ERROR_RESPONSES)
    app.include_router(invoices_router.router, responses=ERROR_RESPONSES)
    app.include_router(statistics_router.router, responses=ERROR_RESPONSES)

    @app.get("/docs", tags=["technique"])
    def api_documentation() -> dict:
        return API_DOCUMENTATION

    @app.get("/health", tags=["technique"])
    def healthcheck() -> dict[str, str]:
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.service_name,
        }

    LOGGER.info("Application %s initialisée (env=%s)", API_TITLE, settings.app_env)
    return app


app = create_app()


def run() -> None:
    """Point d'entrée console : ``factures-api``."""

    import uvicorn

    settings = Settings.load()
    uvicorn.run("backend.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
