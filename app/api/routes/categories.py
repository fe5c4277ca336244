from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_category_service, get_product_service
from app.api.schemas.product import CategoryOut, ProductOut
from app.services.catalog import CategoryNotFound, CategoryService, ProductService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
async def list_categories(categories: CategoryService = Depends(get_category_service)):
    return [CategoryOut.from_model(c) for c in await categories.get_all()]


@router.get("/featured", response_model=List[CategoryOut])
async def featured_categories(categories: CategoryService = Depends(get_category_service)):
    return [CategoryOut.from_model(c) for c in await categories.get_featured()]


@router.get("/slug/{slug}", response_model=CategoryOut)
async def get_category_by_slug(slug: str, categories: CategoryService = Depends(get_category_service)):
    try:
        return CategoryOut.from_model(await categories.get_by_slug(slug))
    except CategoryNotFound:
        raise HTTPException(status_code=404, detail="Category not found")


@router.get("/{slug}/products", response_model=List[ProductOut])
async def category_products(
    slug: str,
    categories: CategoryService = Depends(get_category_service),
    products: ProductService = Depends(get_product_service),
):
    # products reference categories by name; resolve the slug first
    try:
        category = await categories.get_by_slug(slug)
    except CategoryNotFound:
        raise HTTPException(status_code=404, detail="Category not found")
    return [ProductOut.from_model(p) for p in await products.get_by_category(category.name)]


@router.get("/{category_id}", response_model=CategoryOut)
async def get_category(category_id: str, categories: CategoryService = Depends(get_category_service)):
    try:
        return CategoryOut.from_model(await categories.get_by_id(category_id))
    except CategoryNotFound:
        raise HTTPException(status_code=404, detail="Category not found")
