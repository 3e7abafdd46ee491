"""Accès SQL partagé : engine poolé, lectures en DataFrame ou dictionnaires, insertions avec RETURNING."""

from functools import lru_cache  # Cache standard pour l'engine
from typing import Any

import pandas as pd  # Bibliothèque de manipulation de données tabulaires
from sqlalchemy import create_engine, text  # Création d'engine et requêtes SQL
from sqlalchemy.sql.elements import ClauseElement  # Types des expressions SQLAlchemy
from sqlalchemy.engine import Engine  # Type du moteur SQLAlchemy

from .database_url import get_database_url  # Fonction pour récupérer l'URL de base de données
from .settings import AppSettings

SETTINGS = AppSettings.load()
DATABASE_URL = SETTINGS.database_url or get_database_url()  # Construit l'URL de connexion depuis l'environnement
POOL_SIZE = SETTINGS.db_pool_size
POOL_MAX_OVERFLOW = SETTINGS.db_pool_max_overflow


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Retourne le moteur SQLAlchemy partagé par tout le processus (pool de connexions)."""
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if DATABASE_URL.startswith("sqlite"):
        # SQLite en mémoire/file -> utiliser le pool par défaut adapté.
        pass
    else:
        kwargs.update(
            {
                "pool_size": max(1, POOL_SIZE),
                "max_overflow": max(0, POOL_MAX_OVERFLOW),
            }
        )
    return create_engine(DATABASE_URL, **kwargs)


def _normalize_statement(sql: str | ClauseElement) -> ClauseElement:
    if isinstance(sql, str):  # Si la requête est une chaîne brute
        return text(sql)  # Convertit en TextClause SQLAlchemy
    if isinstance(sql, ClauseElement):  # Si c'est déjà une expression SQL
        return sql
    raise TypeError("sql must be a string or SQLAlchemy ClauseElement")


def query_df(sql: str | ClauseElement, params=None) -> pd.DataFrame:
    """Exécute une requête SELECT et retourne le résultat sous forme de DataFrame Pandas."""
    statement = _normalize_statement(sql)
    if params is not None and not isinstance(params, dict):
        raise TypeError("params must be a mapping when provided")

    bound_statement = statement.bindparams(**params) if params else statement

    eng = get_engine()
    with eng.connect() as conn:  # Connexion rendue au pool en sortie de bloc
        result = conn.execute(bound_statement)

        columns = list(result.keys())
        rows = result.fetchall()

        if not rows:
            return pd.DataFrame(columns=columns)

        return pd.DataFrame([tuple(row) for row in rows], columns=columns)


def as_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convertit un DataFrame en dictionnaires Python (NaN -> None pour la sérialisation JSON)."""

    if df.empty:
        return []
    cleaned = df.astype(object).where(pd.notna(df), None)
    return cleaned.to_dict(orient="records")


def query_records(sql: str | ClauseElement, params=None) -> list[dict[str, Any]]:
    """Raccourci : SELECT -> liste de dictionnaires."""

    return as_records(query_df(sql, params=params))


def exec_sql_return_id(sql: str | ClauseElement, params=None):
    """
    Exécute une requête et retourne l'ID (via RETURNING id).
    Ne supporte pas l'exécution en lot (car une seule ID est retournée).
    """
    statement = _normalize_statement(sql)
    eng = get_engine()
    with eng.begin() as conn:
        result = conn.execute(statement, params)
        row = result.fetchone()
        return row[0] if row else None
