# src/scrapers/base_extractor.py

"""Abstract base class for the metadata extraction surfaces."""

import logging
from abc import ABC, abstractmethod

from src.filters.url_normalizer import canonical_product_url
from src.models.errors import ExtractionError
from src.models.metadata import ProductMetadata
from src.scrapers.field_rules import REQUIRED_FIELDS, FieldRule


def collapse_whitespace(text: str) -> str:
    """Join all whitespace runs in *text* into single spaces."""
    return " ".join(text.split())


class MetadataExtractor(ABC):
    """Walks the field-priority tables over one page source.

    Subclasses supply the tables and :meth:`_apply_rule`, which resolves
    a single :class:`FieldRule` against their source type and returns an
    empty string when the rule does not match.
    """

    surface: str = "base"
    field_rules: dict[str, tuple[FieldRule, ...]] = {}
    price_rules: tuple[FieldRule, ...] = ()

    def __init__(self) -> None:
        self.logger = logging.getLogger(
            f"link_card.extractor.{self.surface}"
        )

    def extract(
        self, url: str, affiliate_tag: str | None = None
    ) -> ProductMetadata:
        """Build a :class:`ProductMetadata` record for the page at *url*.

        Raises:
            ExtractionError: If every rule for a required field is empty.
            InvalidURLError: If *url* cannot be normalised.
        """
        canonical_url = canonical_product_url(url, affiliate_tag)

        values: dict[str, str] = {}
        for field_name in REQUIRED_FIELDS:
            value = self._first_match(field_name, self.field_rules[field_name])
            if not value:
                self.logger.warning(
                    "[%s] No rule matched '%s' for %s",
                    self.surface,
                    field_name,
                    canonical_url,
                )
                raise ExtractionError(field_name)
            values[field_name] = value

        price = self._first_match("price", self.price_rules) or None
        if price is None:
            self.logger.info(
                "[%s] No price found for %s", self.surface, canonical_url
            )

        return ProductMetadata(
            title=values["title"],
            image=values["image"],
            description=values["description"],
            price=price,
            url=canonical_url,
        )

    def _first_match(
        self, field_name: str, rules: tuple[FieldRule, ...]
    ) -> str:
        """Return the first non-empty value produced by *rules*."""
        for tier, rule in enumerate(rules, 1):
            value = self._postprocess(field_name, self._apply_rule(rule))
            if rule.max_length is not None:
                value = value[: rule.max_length]
            if value:
                self.logger.debug(
                    "[%s] %s resolved by tier %d (%s %s)",
                    self.surface,
                    field_name,
                    tier,
                    rule.kind.value,
                    rule.target or rule.attr,
                )
                return value
        return ""

    def _postprocess(self, field_name: str, value: str) -> str:
        """Hook for surface-specific cleanup of a located value."""
        return value.strip()

    @abstractmethod
    def _apply_rule(self, rule: FieldRule) -> str:
        """Resolve *rule* against the source; ``""`` when it does not match."""
        ...
