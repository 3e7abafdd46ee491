from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from core.data_repository import exec_sql_return_id, query_records
from backend.services.errors import ConflictError, NotFoundError, is_unique_violation

LOGGER = logging.getLogger(__name__)

CLIENT_COLUMNS = (
    "id, code_client, nom, adresse, ville, code_postal, telephone, email, forme_juridique, date_creation"
)
CLIENT_FIELDS = (
    "code_client",
    "nom",
    "adresse",
    "ville",
    "code_postal",
    "telephone",
    "email",
    "forme_juridique",
)


def list_clients() -> list[dict[str, Any]]:
    return query_records(f"SELECT {CLIENT_COLUMNS} FROM clients ORDER BY nom, id")


def find_client(client_id: int) -> dict[str, Any] | None:
    records = query_records(
        f"SELECT {CLIENT_COLUMNS} FROM clients WHERE id = :cid",
        params={"cid": int(client_id)},
    )
    return records[0] if records else None


def get_client(client_id: int) -> dict[str, Any]:
    client = find_client(client_id)
    if client is None:
        raise NotFoundError(f"Client {client_id} non trouvé")
    return client


def create_client(payload: Mapping[str, Any]) -> int:
    """Insère un client ; un ``code_client`` déjà pris lève ``ConflictError``."""

    params = {field: payload.get(field) for field in CLIENT_FIELDS}
    try:
        client_id = exec_sql_return_id(
            text(
                """
                INSERT INTO clients
                (code_client, nom, adresse, ville, code_postal, telephone, email, forme_juridique)
                VALUES (:code_client, :nom, :adresse, :ville, :code_postal, :telephone, :email, :forme_juridique)
                RETURNING id
                """
            ),
            params,
        )
    except IntegrityError as exc:
        if is_unique_violation(exc):
            LOGGER.warning("Code client déjà existant: %s", params["code_client"])
            raise ConflictError("Code client déjà existant", details=f"code_client={params['code_client']}") from exc
        raise

    LOGGER.info("Client %s créé (code %s)", client_id, params["code_client"])
    return int(client_id)
