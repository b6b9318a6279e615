# showroom/config/settings.py

"""Central configuration for the showroom inventory browser."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the showroom inventory browser."""

    # --- Inventory API ---
    API_BASE_URL: str = os.getenv(
        "SHOWROOM_API_URL", "http://localhost:3001"
    ).rstrip("/")
    CARS_ENDPOINT: str = "/api/cars"
    REQUEST_DELAY: float = 0.5          # Base backoff between retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Retry count on transient failures
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "Content-Type": "application/json",
    }

    # --- Search result cache ---
    SEARCH_CACHE_TTL: float = 300.0     # 5 minutes per entry
    SEARCH_CACHE_MAX_ENTRIES: int = 50

    # --- Incremental list ---
    ITEMS_PER_PAGE: int = 12
    GRID_ITEM_HEIGHT: float = 400.0     # Estimated card height (grid)
    LIST_ITEM_HEIGHT: float = 200.0     # Estimated card height (list)
    TAIL_SCROLL_MARGIN: float = 50.0    # Distance from bottom that loads more

    # --- Viewport activation ---
    ACTIVATION_THRESHOLD: float = 0.1
    ACTIVATION_ROOT_MARGIN: str = "50px"
    LAZY_SECTION_ROOT_MARGIN: str = "100px"

    # --- Filters accepted by the inventory endpoint ---
    FILTER_FIELDS: list[str] = [
        "search",
        "make",
        "model",
        "yearFrom",
        "yearTo",
        "priceFrom",
        "priceTo",
        "mileageFrom",
        "mileageTo",
        "fuelType",
        "transmission",
        "bodyType",
        "color",
        "category",
        "featured",
        "sortBy",
        "sortOrder",
    ]
    DEFAULT_SORT_BY: str = "createdAt"
    DEFAULT_SORT_ORDER: str = "desc"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    CONSOLE_LOG_LEVEL: str = os.getenv("SHOWROOM_LOG_LEVEL", "WARNING").upper()
