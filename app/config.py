# app/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from functools import lru_cache
from typing import List

BUNDLED_CATALOG_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    ENV: str = "development"
    DATA_DIR: Path = Path("data")  # where the cart mirror lives
    CATALOG_DIR: Path = BUNDLED_CATALOG_DIR
    PRODUCTS_FILE: str = "products.json"  # .csv / .xlsx also accepted
    CATEGORIES_FILE: str = "categories.json"

    # durable cart slot; changing the stored shape means deleting this entry
    CART_STORAGE_KEY: str = "shopflow-cart"
    CART_ADD_DELAY_MS: int = 0
    SIMULATE_LATENCY: bool = True

    FREE_SHIPPING_THRESHOLD: float = 100.0
    SHIPPING_FEE: float = 9.99
    TAX_RATE: float = 0.08

    NOTIFICATION_HISTORY: int = 50
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Example .env:
    # DATA_DIR=./data
    # SIMULATE_LATENCY=false
    # CORS_ORIGINS=["https://shop.example.com"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def products_path(self) -> Path:
        return Path(self.CATALOG_DIR) / self.PRODUCTS_FILE

    @property
    def categories_path(self) -> Path:
        return Path(self.CATALOG_DIR) / self.CATEGORIES_FILE


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
