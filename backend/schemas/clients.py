"""Pydantic schemas for client endpoints."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ClientCreate(BaseModel):
    code_client: str = Field(..., min_length=1, max_length=50)
    nom: str = Field(..., min_length=1, max_length=255)
    adresse: str = Field(..., min_length=1)
    ville: str = Field(..., min_length=1, max_length=120)
    code_postal: str = Field(..., min_length=1, max_length=20)
    telephone: Optional[str] = Field(default=None, max_length=40)
    email: Optional[str] = Field(default=None, max_length=255)
    forme_juridique: Optional[str] = Field(default=None, max_length=80)

    @field_validator("code_client", "nom", "adresse", "ville", "code_postal", mode="before")
    def _strip_required(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("telephone", "email", "forme_juridique", mode="before")
    def _blank_to_none(cls, value):
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None

    @field_validator("email")
    def _check_email(cls, value: str | None) -> str | None:
        if value is not None and not _EMAIL_PATTERN.match(value):
            raise ValueError("Email invalide")
        return value


class ClientOut(BaseModel):
    id: int
    code_client: str
    nom: str
    adresse: str
    ville: str
    code_postal: str
    telephone: Optional[str] = None
    email: Optional[str] = None
    forme_juridique: Optional[str] = None
    date_creation: Optional[datetime] = None


class ClientCreated(BaseModel):
    message: str
    id_client: int


__all__ = ["ClientCreate", "ClientOut", "ClientCreated"]
