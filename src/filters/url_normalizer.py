# src/filters/url_normalizer.py

"""Amazon URL validation, tracking-parameter removal and affiliate rewriting."""

import logging
import re
import urllib.parse
from dataclasses import dataclass

from src.config.settings import Settings
from src.models.errors import InvalidURLError

logger = logging.getLogger("link_card.url")

REASON_INVALID_URL = "Not a valid URL"
REASON_NOT_AMAZON = "Not an Amazon domain"
REASON_NOT_PRODUCT_PAGE = "Not a product page"

# /dp/{ASIN} and /gp/product/{ASIN}, optionally behind a slug segment
_ASIN_PATTERN = re.compile(
    r"/(?:dp|gp/product)/([A-Za-z0-9]{10})(?=[/?#]|$)"
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate`; ``reason`` is set only when invalid."""

    valid: bool
    reason: str | None = None


def _split(url: str) -> urllib.parse.SplitResult:
    """Parse *url*, raising :class:`InvalidURLError` if it is not absolute."""
    try:
        parts = urllib.parse.urlsplit(url.strip())
    except ValueError as exc:
        raise InvalidURLError(f"Unparseable URL: {url!r}") from exc
    if not parts.scheme or not parts.netloc or not parts.hostname:
        raise InvalidURLError(f"Unparseable URL: {url!r}")
    return parts


def _is_tracking_param(key: str) -> bool:
    return (
        key.startswith(Settings.TRACKING_PARAM_PREFIXES)
        or key in Settings.TRACKING_PARAM_NAMES
    )


def normalize(url: str) -> str:
    """Strip ``ref*``, ``_*`` and ``th`` query parameters from *url*.

    All other parameters (including affiliate ``tag``/``linkId``/
    ``linkCode``) are kept in their original order. The function is
    idempotent.

    Raises:
        InvalidURLError: If *url* cannot be parsed as an absolute URL.
    """
    parts = _split(url)
    params = urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
    kept = [(k, v) for k, v in params if not _is_tracking_param(k)]
    if len(kept) != len(params):
        logger.debug(
            "Dropped %d tracking parameter(s) from %s",
            len(params) - len(kept),
            parts.path,
        )
    return urllib.parse.urlunsplit(
        parts._replace(query=urllib.parse.urlencode(kept))
    )


def validate(url: str) -> ValidationResult:
    """Classify *url* as a product page, short link, or neither."""
    try:
        parts = _split(url)
    except InvalidURLError:
        return ValidationResult(False, REASON_INVALID_URL)

    host = parts.hostname or ""
    if host in Settings.SHORT_URL_DOMAINS:
        # Real product path is only known after redirect resolution
        return ValidationResult(True)
    if host not in Settings.STOREFRONT_DOMAINS:
        return ValidationResult(False, REASON_NOT_AMAZON)
    if not any(m in parts.path for m in Settings.PRODUCT_PATH_MARKERS):
        return ValidationResult(False, REASON_NOT_PRODUCT_PAGE)
    return ValidationResult(True)


def extract_asin(url: str) -> str | None:
    """Return the 10-character product identifier in *url*, if any."""
    try:
        path = _split(url).path
    except InvalidURLError:
        return None
    match = _ASIN_PATTERN.search(path)
    return match.group(1) if match else None


def to_affiliate_link(url: str, tag: str | None = None) -> str:
    """Rewrite *url* to ``https://{host}/dp/{ASIN}`` carrying *tag*.

    Returns *url* unchanged when no product identifier can be found.
    """
    asin = extract_asin(url)
    if asin is None:
        logger.debug("No ASIN in %s, leaving URL untouched", url)
        return url

    host = _split(url).netloc
    canonical = f"https://{host}/dp/{asin}"
    if tag:
        return f"{canonical}?tag={urllib.parse.quote(tag, safe='')}"
    return canonical


def canonical_product_url(url: str, tag: str | None = None) -> str:
    """Normalise *url* and apply the affiliate rewrite when *tag* is set."""
    normalized = normalize(url)
    if tag:
        return to_affiliate_link(normalized, tag)
    return normalized
