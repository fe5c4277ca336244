# app/api/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_product_service
from app.api.schemas.product import ProductOut
from app.services.catalog import ProductNotFound, ProductService, SORT_KEYS

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductOut])
async def list_products(
    q: Optional[str] = Query(None, description="search name, description, category and tags"),
    category: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    in_stock: bool = False,
    brand: Optional[str] = None,
    sort: str = Query("relevance", description=f"one of: {', '.join(SORT_KEYS)}"),
    products: ProductService = Depends(get_product_service),
):
    """
    Catalog listing with the storefront's sidebar filters. Without any
    parameters this is the whole catalog in catalog order.
    """
    try:
        results = await products.browse(
            query=q,
            category=category,
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            in_stock=in_stock,
            brand=brand,
            sort=sort,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [ProductOut.from_model(p) for p in results]


@router.get("/featured", response_model=List[ProductOut])
async def featured_products(products: ProductService = Depends(get_product_service)):
    return [ProductOut.from_model(p) for p in await products.get_featured()]


@router.get("/on-sale", response_model=List[ProductOut])
async def on_sale_products(products: ProductService = Depends(get_product_service)):
    return [ProductOut.from_model(p) for p in await products.get_on_sale()]


@router.get("/search", response_model=List[ProductOut])
async def search_products(
    q: str = Query(..., min_length=1),
    limit: Optional[int] = Query(None, ge=1, description="e.g. 5 for search-as-you-type suggestions"),
    products: ProductService = Depends(get_product_service),
):
    results = await products.search(q)
    if limit is not None:
        results = results[:limit]
    return [ProductOut.from_model(p) for p in results]


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: str, products: ProductService = Depends(get_product_service)):
    try:
        return ProductOut.from_model(await products.get_by_id(product_id))
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")


@router.get("/{product_id}/related", response_model=List[ProductOut])
async def related_products(product_id: str, products: ProductService = Depends(get_product_service)):
    """Up to four other products from the same category."""
    try:
        product = await products.get_by_id(product_id)
    except ProductNotFound:
        raise HTTPException(status_code=404, detail="Product not found")
    return [ProductOut.from_model(p) for p in await products.get_related(product.id, product.category)]
