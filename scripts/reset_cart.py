"""Delete the stored cart slot (needed after the stored line-item shape changes)."""
import logging

from app.config import get_settings
from app.database import CartStorage, FileBackedKV

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("reset_cart")


def main() -> None:
    settings = get_settings()
    storage = CartStorage(FileBackedKV(settings.DATA_DIR), settings.CART_STORAGE_KEY)
    if storage.reset():
        logger.info("Removed stored cart %r from %s", settings.CART_STORAGE_KEY, settings.DATA_DIR)
    else:
        logger.info("No stored cart %r in %s", settings.CART_STORAGE_KEY, settings.DATA_DIR)


if __name__ == "__main__":
    main()
