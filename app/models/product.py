# app/models/product.py
from __future__ import annotations
from dataclasses import dataclass, asdict, field, replace
from typing import Optional, Dict, Any, List
import json
import math


def _missing(v: Any) -> bool:
    # catalog rows read through pandas carry NaN for absent cells
    if v is None:
        return True
    if isinstance(v, float) and math.isnan(v):
        return True
    return isinstance(v, str) and v.strip() == ""


def _pick(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in d and not _missing(d[k]):
            return d[k]
    return default


def _to_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "y", "t")
    if _missing(v):
        return False
    return bool(v)


def _to_list(v: Any) -> List[str]:
    """Accept a real list, a JSON-encoded list (CSV/XLSX cells) or a comma separated string."""
    if _missing(v):
        return []
    if isinstance(v, (list, tuple)):
        return [str(x) for x in v]
    if isinstance(v, str):
        s = v.strip()
        if s.startswith("["):
            try:
                parsed = json.loads(s)
                if isinstance(parsed, list):
                    return [str(x) for x in parsed]
            except ValueError:
                pass
        return [p.strip() for p in s.split(",") if p.strip()]
    return [str(v)]


def is_int_text(s: str) -> bool:
    # ASCII only: isdigit() also accepts characters like "²" that int() rejects
    digits = s[1:] if s.startswith("-") else s
    return s.isascii() and digits.isdigit()


def _to_id(v: Any) -> Any:
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str) and is_int_text(v.strip()):
        return int(v.strip())
    return v


@dataclass
class Product:
    """
    Catalog product. Catalog files may use the storefront's camelCase keys
    (Id, originalPrice, reviewCount, inStock, onSale) or snake_case.
    """
    id: Any
    name: str = ""
    description: str = ""
    price: float = 0.0
    original_price: Optional[float] = None
    category: str = ""
    tags: List[str] = field(default_factory=list)
    featured: bool = False
    on_sale: bool = False
    images: List[str] = field(default_factory=list)
    rating: float = 0.0
    review_count: int = 0
    in_stock: bool = True
    brand: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Product":
        if d is None:
            raise ValueError("Cannot construct Product from None")
        id_val = _pick(d, "id", "Id", "product_id")
        if id_val is None:
            raise ValueError("Product record has no id")

        original_price = _pick(d, "original_price", "originalPrice")
        return cls(
            id=_to_id(id_val),
            name=str(_pick(d, "name", "title", default="")),
            description=str(_pick(d, "description", default="")),
            price=float(_pick(d, "price", default=0.0)),
            original_price=float(original_price) if original_price is not None else None,
            category=str(_pick(d, "category", default="")),
            tags=_to_list(_pick(d, "tags")),
            featured=_to_bool(_pick(d, "featured", default=False)),
            on_sale=_to_bool(_pick(d, "on_sale", "onSale", default=False)),
            images=_to_list(_pick(d, "images", "image")),
            rating=float(_pick(d, "rating", default=0.0)),
            review_count=int(float(_pick(d, "review_count", "reviewCount", default=0))),
            in_stock=_to_bool(_pick(d, "in_stock", "inStock", default=True)),
            brand=_pick(d, "brand"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def copy(self) -> "Product":
        return replace(self, tags=list(self.tags), images=list(self.images))


@dataclass
class Category:
    id: Any
    name: str = ""
    slug: str = ""
    description: str = ""
    image: Optional[str] = None
    featured: bool = False
    product_count: int = 0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Category":
        if d is None:
            raise ValueError("Cannot construct Category from None")
        id_val = _pick(d, "id", "Id")
        if id_val is None:
            raise ValueError("Category record has no id")
        name = str(_pick(d, "name", default=""))
        return cls(
            id=_to_id(id_val),
            name=name,
            slug=str(_pick(d, "slug", default=name.lower().replace(" ", "-"))),
            description=str(_pick(d, "description", default="")),
            image=_pick(d, "image"),
            featured=_to_bool(_pick(d, "featured", default=False)),
            product_count=int(float(_pick(d, "product_count", "productCount", default=0))),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def copy(self) -> "Category":
        return replace(self)
