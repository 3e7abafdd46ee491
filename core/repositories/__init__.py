"""
Repository Layer - transaction management for the invoicing services.

This module provides the Unit of Work used when several statements must be
committed or rolled back together (invoice creation, product creation,
catalog price changes).
"""

from .base import SqlUnitOfWork

__all__ = [
    "SqlUnitOfWork",
]
