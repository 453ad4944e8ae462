# src/scrapers/extract.py

"""Select the extraction surface that matches a page source."""

from bs4 import Tag

from src.models.metadata import ProductMetadata
from src.scrapers.base_extractor import MetadataExtractor
from src.scrapers.dom_extractor import DomExtractor
from src.scrapers.html_extractor import HtmlExtractor


def get_extractor(source: Tag | str) -> MetadataExtractor:
    """Return a DOM extractor for parsed documents, HTML for raw strings."""
    # BeautifulSoup is itself a Tag subclass
    if isinstance(source, Tag):
        return DomExtractor(source)
    if isinstance(source, str):
        return HtmlExtractor(source)
    raise TypeError(
        f"Unsupported page source type: {type(source).__name__}"
    )


def extract_metadata(
    source: Tag | str, url: str, affiliate_tag: str | None = None
) -> ProductMetadata:
    """Extract a :class:`ProductMetadata` record from *source*."""
    return get_extractor(source).extract(url, affiliate_tag)
