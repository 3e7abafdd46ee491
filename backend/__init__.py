"""Backend package: FastAPI application, routers, schemas and services for invoicing."""
