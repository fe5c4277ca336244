"""
Write the bundled catalog out as CSV or Excel, for editing in a spreadsheet.
List columns (tags, images) are stored as JSON strings.

    python -m scripts.export_catalog data/products.csv
"""
import json
import sys
from pathlib import Path

import pandas as pd

from app.config import get_settings
from app.database import read_table
from app.models.product import Product


def main(target: str) -> None:
    settings = get_settings()
    rows = [Product.from_dict(r).to_dict() for r in read_table(settings.products_path)]
    for row in rows:
        row["tags"] = json.dumps(row["tags"])
        row["images"] = json.dumps(row["images"])
    df = pd.DataFrame(rows)
    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in (".xls", ".xlsx"):
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False)
    print(f"Wrote {len(rows)} products to {path}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "data/products.csv")
