# app/services/catalog.py
"""
Read-only product and category queries over the static catalog.

Each call sleeps for a fixed per-operation latency to stand in for a network
round trip (the catalog is really just two files loaded at startup). Every
result is a copy, so callers may mutate what they get back.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional
import asyncio
import logging

from app.database import read_table
from app.models.product import Category, Product, is_int_text

logger = logging.getLogger(__name__)

# seconds, per operation
PRODUCT_LATENCY: Dict[str, float] = {
    "get_all": 0.3,
    "get_by_id": 0.2,
    "get_by_category": 0.4,
    "get_featured": 0.25,
    "get_on_sale": 0.3,
    "search": 0.35,
    "get_related": 0.3,
    "browse": 0.35,
}

CATEGORY_LATENCY: Dict[str, float] = {
    "get_all": 0.2,
    "get_by_id": 0.15,
    "get_by_slug": 0.2,
    "get_featured": 0.25,
}

RELATED_LIMIT = 4

SORT_KEYS = ("relevance", "name", "price-low", "price-high", "rating")


class NotFoundError(LookupError):
    pass


class ProductNotFound(NotFoundError):
    def __init__(self, product_id: Any):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class CategoryNotFound(NotFoundError):
    def __init__(self, key: Any):
        super().__init__(f"Category not found: {key}")
        self.key = key


def _coerce_id(value: Any) -> Any:
    if isinstance(value, str) and is_int_text(value.strip()):
        return int(value.strip())
    return value


class _DelayedService:
    def __init__(self, latency: Optional[Dict[str, float]] = None):
        self.latency = dict(latency or {})

    async def _delay(self, op: str) -> None:
        seconds = self.latency.get(op, 0.0)
        if seconds > 0:
            await asyncio.sleep(seconds)


class ProductService(_DelayedService):
    def __init__(self, products: Iterable[Product], latency: Optional[Dict[str, float]] = None):
        super().__init__(latency)
        self._products: List[Product] = [p.copy() for p in products]

    def _copies(self, pred: Optional[Callable[[Product], bool]] = None) -> List[Product]:
        return [p.copy() for p in self._products if pred is None or pred(p)]

    async def get_all(self) -> List[Product]:
        await self._delay("get_all")
        return self._copies()

    async def get_by_id(self, product_id: Any) -> Product:
        await self._delay("get_by_id")
        wanted = _coerce_id(product_id)
        for p in self._products:
            if p.id == wanted:
                return p.copy()
        raise ProductNotFound(product_id)

    async def get_by_category(self, category: str) -> List[Product]:
        await self._delay("get_by_category")
        wanted = (category or "").lower()
        return self._copies(lambda p: p.category.lower() == wanted)

    async def get_featured(self) -> List[Product]:
        await self._delay("get_featured")
        return self._copies(lambda p: p.featured)

    async def get_on_sale(self) -> List[Product]:
        await self._delay("get_on_sale")
        return self._copies(lambda p: p.on_sale)

    async def search(self, query: str) -> List[Product]:
        await self._delay("search")
        return self._copies(_matches_query(query))

    async def get_related(self, product_id: Any, category: str) -> List[Product]:
        await self._delay("get_related")
        excluded = _coerce_id(product_id)
        wanted = (category or "").lower()
        related = [p for p in self._products if p.id != excluded and p.category.lower() == wanted]
        return [p.copy() for p in related[:RELATED_LIMIT]]

    async def browse(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_rating: Optional[float] = None,
        in_stock: bool = False,
        brand: Optional[str] = None,
        sort: str = "relevance",
    ) -> List[Product]:
        """
        Listing used by the category and search pages: narrow by query and
        category, apply the sidebar filters, then sort. "relevance" keeps
        catalog order.
        """
        if sort not in SORT_KEYS:
            raise ValueError(f"Unknown sort {sort!r}; expected one of {', '.join(SORT_KEYS)}")
        await self._delay("browse")

        results = self._copies(_matches_query(query) if query else None)
        if category:
            results = [p for p in results if p.category.lower() == category.lower()]
        if min_price is not None:
            results = [p for p in results if p.price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.price <= max_price]
        if min_rating is not None:
            results = [p for p in results if p.rating >= min_rating]
        if in_stock:
            results = [p for p in results if p.in_stock]
        if brand:
            results = [p for p in results if (p.brand or "").lower() == brand.lower()]

        # sorted() is stable so ties keep catalog order
        if sort == "name":
            results = sorted(results, key=lambda p: p.name.lower())
        elif sort == "price-low":
            results = sorted(results, key=lambda p: p.price)
        elif sort == "price-high":
            results = sorted(results, key=lambda p: p.price, reverse=True)
        elif sort == "rating":
            results = sorted(results, key=lambda p: p.rating, reverse=True)
        return results


def _matches_query(query: Optional[str]) -> Callable[[Product], bool]:
    q = (query or "").lower()

    def pred(p: Product) -> bool:
        return (
            q in p.name.lower()
            or q in p.description.lower()
            or q in p.category.lower()
            or any(q in tag.lower() for tag in p.tags)
        )

    return pred


class CategoryService(_DelayedService):
    def __init__(self, categories: Iterable[Category], latency: Optional[Dict[str, float]] = None):
        super().__init__(latency)
        self._categories: List[Category] = [c.copy() for c in categories]

    async def get_all(self) -> List[Category]:
        await self._delay("get_all")
        return [c.copy() for c in self._categories]

    async def get_by_id(self, category_id: Any) -> Category:
        await self._delay("get_by_id")
        wanted = _coerce_id(category_id)
        for c in self._categories:
            if c.id == wanted:
                return c.copy()
        raise CategoryNotFound(category_id)

    async def get_by_slug(self, slug: str) -> Category:
        await self._delay("get_by_slug")
        for c in self._categories:
            if c.slug == slug:
                return c.copy()
        raise CategoryNotFound(slug)

    async def get_featured(self) -> List[Category]:
        await self._delay("get_featured")
        return [c.copy() for c in self._categories if c.featured]


class Catalog:
    """Both query services, loaded from the catalog files once."""

    def __init__(self, products: ProductService, categories: CategoryService):
        self.products = products
        self.categories = categories

    @classmethod
    def load(cls, products_path: Path, categories_path: Path, simulate_latency: bool = True) -> "Catalog":
        products = [Product.from_dict(r) for r in read_table(products_path)]
        categories: List[Category] = []
        if Path(categories_path).exists():
            categories = [Category.from_dict(r) for r in read_table(categories_path)]
        else:
            logger.warning("Categories file %s not found; serving no categories", categories_path)
        logger.info("Loaded catalog: %d products, %d categories", len(products), len(categories))
        return cls(
            ProductService(products, PRODUCT_LATENCY if simulate_latency else None),
            CategoryService(categories, CATEGORY_LATENCY if simulate_latency else None),
        )
