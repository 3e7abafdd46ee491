"""Pydantic schemas shared by every resource (error bodies)."""

from __future__ import annotations

from typing import List, Union

from pydantic import BaseModel


class FieldError(BaseModel):
    champ: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Union[List[FieldError], str, None] = None


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Données invalides ou règle métier non respectée"},
    404: {"model": ErrorResponse, "description": "Ressource non trouvée"},
    409: {"model": ErrorResponse, "description": "Conflit - Données déjà existantes"},
    500: {"model": ErrorResponse, "description": "Erreur interne du serveur"},
}


__all__ = ["ErrorResponse", "FieldError", "ERROR_RESPONSES"]
