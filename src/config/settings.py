# src/config/settings.py

"""Central configuration for the amazon_link_card generator."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the amazon_link_card generator."""

    # --- Storefront recognition ---
    STOREFRONT_DOMAINS: list[str] = [
        "amazon.co.jp",
        "amazon.com",
        "amazon.co.uk",
        "amazon.de",
        "amazon.fr",
        "amazon.it",
        "amazon.es",
        "amazon.ca",
        "www.amazon.co.jp",
        "www.amazon.com",
        "www.amazon.co.uk",
        "www.amazon.de",
        "www.amazon.fr",
        "www.amazon.it",
        "www.amazon.es",
        "www.amazon.ca",
    ]
    SHORT_URL_DOMAINS: list[str] = ["amzn.to", "a.co"]
    PRODUCT_PATH_MARKERS: list[str] = ["/dp/", "/gp/product/"]
    TRACKING_PARAM_PREFIXES: tuple[str, ...] = ("ref", "_")
    TRACKING_PARAM_NAMES: frozenset[str] = frozenset({"th"})
    STOREFRONT_PREFIXES: list[str] = ["Amazon.co.jp:", "Amazon.com:"]

    # --- Extraction ---
    DESCRIPTION_MAX_LENGTH: int = 150   # Free-text fallback truncation
    FALLBACK_CURRENCY: str = "¥"        # Prefix for composed prices

    # --- Affiliate ---
    AFFILIATE_TAG: str = os.getenv("LINK_CARD_AFFILIATE_TAG", "")

    # --- Fetching ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "ja,en-US;q=0.9,en;q=0.8",
    }
    CREDENTIAL_HEADER: str = "Cookie"

    # --- Credential store ---
    COOKIE_STORAGE_KEY: str = "amazon-link-card:cookie"
    COOKIE_EXPIRY_DAYS: int = 365

    # --- Card rendering ---
    CARD_CTA_TEXT: str = "Amazonで見る →"
    CARD_BREAKPOINT_PX: int = 600

    # --- API server ---
    API_HOST: str = os.getenv("LINK_CARD_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("LINK_CARD_PORT", "8787"))
    CORS_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    COOKIE_STORE_PATH: Path = Path(
        os.getenv(
            "LINK_CARD_COOKIE_PATH",
            str(BASE_DIR / "data" / "credentials.json"),
        )
    )
