"""Client endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from backend.schemas.clients import ClientCreate, ClientCreated, ClientOut
from backend.services import clients as clients_service

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=list[ClientOut])
def list_clients():
    return clients_service.list_clients()


@router.get("/{client_id}", response_model=ClientOut)
def get_client(client_id: int):
    return clients_service.get_client(client_id)


@router.post("", response_model=ClientCreated, status_code=status.HTTP_201_CREATED)
def create_client(payload: ClientCreate):
    client_id = clients_service.create_client(payload.model_dump())
    return ClientCreated(message="Client créé avec succès", id_client=client_id)
