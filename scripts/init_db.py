"""Creates the empty CSV tables (and the local media folder) for a fresh checkout."""
from pathlib import Path

import pandas as pd

from campus_market.config import get_settings

SECTION_COLUMNS = ["id", "title", "created_at", "updated_at"]
PRODUCT_COLUMNS = [
    "id", "title", "price", "available", "section", "short", "full", "location",
    "images", "video", "created_at", "updated_at",
]

settings = get_settings()
data_dir = Path(settings.DATA_DIR)
data_dir.mkdir(parents=True, exist_ok=True)

for filename, columns in ((settings.SECTIONS_FILE, SECTION_COLUMNS), (settings.PRODUCTS_FILE, PRODUCT_COLUMNS)):
    path = data_dir / filename
    if path.exists():
        print(f"{path} already exists")
        continue
    pd.DataFrame(columns=columns).to_csv(path, index=False)
    print(f"Created {path}")

if settings.MEDIA_BACKEND.strip().lower() == "local":
    Path(settings.MEDIA_DIR).mkdir(parents=True, exist_ok=True)
