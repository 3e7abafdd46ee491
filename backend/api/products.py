"""Product endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from backend.schemas.products import ProductCreate, ProductCreated, ProductOut
from backend.services import products as products_service

router = APIRouter(prefix="/produits", tags=["produits"])


@router.get("", response_model=list[ProductOut])
def list_products():
    return products_service.list_products()


@router.get("/{produit_id}", response_model=ProductOut)
def get_product(produit_id: int):
    return products_service.get_product(produit_id)


@router.post("", response_model=ProductCreated, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate):
    produit_id = products_service.create_product(
        nom_produit=payload.nom_produit,
        description=payload.description,
        prix_unitaire_ht=payload.prix_unitaire_ht,
        taux_tva=payload.taux_tva,
    )
    return ProductCreated(message="Produit créé avec succès", id_produit=produit_id)
