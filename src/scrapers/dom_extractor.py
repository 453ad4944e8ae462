# src/scrapers/dom_extractor.py

"""Metadata extraction over a parsed page document (BeautifulSoup)."""

from bs4 import BeautifulSoup, Tag

from src.config.settings import Settings
from src.scrapers.base_extractor import MetadataExtractor, collapse_whitespace
from src.scrapers.field_rules import (
    DOM_FIELD_RULES,
    DOM_PRICE_RULES,
    FieldRule,
    RuleKind,
)


class DomExtractor(MetadataExtractor):
    """Extract metadata from an already loaded product page.

    The document is queried structurally, so price lookups can be scoped
    to the desktop/mobile/apex price containers.
    """

    surface = "dom"
    field_rules = DOM_FIELD_RULES
    price_rules = DOM_PRICE_RULES

    def __init__(self, document: BeautifulSoup | Tag) -> None:
        super().__init__()
        self.document = document

    @classmethod
    def from_markup(cls, markup: str) -> "DomExtractor":
        """Parse *markup* with lxml and wrap the resulting document."""
        return cls(BeautifulSoup(markup, "lxml"))

    def _text(self, element: Tag | None) -> str:
        if element is None:
            return ""
        return collapse_whitespace(element.get_text(" "))

    def _joined_text(self, element: Tag | None) -> str:
        """Text of *element* with its nested pieces joined directly."""
        if element is None:
            return ""
        return element.get_text(strip=True)

    def _attr(self, element: Tag | None, attr: str) -> str:
        if element is None:
            return ""
        value = element.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        return value or ""

    def _apply_rule(self, rule: FieldRule) -> str:
        doc = self.document
        kind = rule.kind

        if kind is RuleKind.META_NAME:
            return self._attr(doc.find("meta", attrs={"name": rule.target}), "content")
        if kind is RuleKind.META_PROPERTY:
            return self._attr(
                doc.find("meta", attrs={"property": rule.target}), "content"
            )
        if kind is RuleKind.ELEMENT_TEXT:
            return self._text(doc.find(id=rule.target))
        if kind is RuleKind.ELEMENT_ATTR:
            return self._attr(doc.find(id=rule.target), rule.attr)
        if kind is RuleKind.SELECTOR_TEXT:
            return self._text(doc.select_one(rule.target))
        if kind is RuleKind.COMPOSED_PRICE:
            return self._composed_price(rule.target)

        self.logger.debug(
            "[dom] Rule kind %s is not used on parsed documents", kind.value
        )
        return ""

    def _composed_price(self, container_selector: str) -> str:
        """Build a price from whole/fraction parts scoped to one container."""
        container = self.document.select_one(container_selector)
        if container is None:
            return ""
        # The whole part nests its decimal separator in a child span
        whole = self._joined_text(container.select_one(".a-price-whole"))
        if not whole:
            return ""
        fraction = self._joined_text(container.select_one(".a-price-fraction"))
        return f"{Settings.FALLBACK_CURRENCY}{whole}{fraction}"
