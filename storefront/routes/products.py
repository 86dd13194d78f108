"""Catalog API routes for the storefront"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..database.collections import collection_db
from ..database.products import product_db
from ..models.product import (
    Collection,
    Product,
    ProductCategory,
    ProductSearchResponse,
    ProductType,
)

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get("/products", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search name or brand"),
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    type: Optional[ProductType] = Query(None, description="Perfume or sample"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    """Search products in the catalog"""
    products, total = product_db.search_products(
        query=query,
        category=category,
        product_type=type,
        limit=limit,
        offset=offset,
    )
    return ProductSearchResponse(products=products, total=total, limit=limit, offset=offset)


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """Get a product by ID"""
    product = product_db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/collections", response_model=list[Collection])
async def list_collections(featured: bool = Query(False, description="Only featured collections")):
    """List collections"""
    return collection_db.list_collections(featured_only=featured)


@router.get("/collections/{collection_id}", response_model=Collection)
async def get_collection(collection_id: str):
    """Get a collection by ID"""
    collection = collection_db.get_collection(collection_id)
    if not collection:
        raise HTTPException(status_code=404, detail="Collection not found")
    return collection
