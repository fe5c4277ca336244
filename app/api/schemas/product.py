from typing import List, Optional, Any
from pydantic import BaseModel, Field

from app.models.product import Category, Product


class ProductOut(BaseModel):
    id: Any
    name: str
    description: str = ""
    price: float = Field(..., ge=0)
    original_price: Optional[float] = None
    category: str = ""
    tags: List[str] = []
    featured: bool = False
    on_sale: bool = False
    images: List[str] = []
    rating: float = 0.0
    review_count: int = 0
    in_stock: bool = True
    brand: Optional[str] = None

    @classmethod
    def from_model(cls, product: Product) -> "ProductOut":
        return cls(**product.to_dict())


class CategoryOut(BaseModel):
    id: Any
    name: str
    slug: str
    description: str = ""
    image: Optional[str] = None
    featured: bool = False
    product_count: int = 0

    @classmethod
    def from_model(cls, category: Category) -> "CategoryOut":
        return cls(**category.to_dict())
