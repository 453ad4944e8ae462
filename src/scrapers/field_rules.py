# src/scrapers/field_rules.py

"""Declarative field-location priority tables shared by every extractor.

Each field maps to an ordered tuple of :class:`FieldRule` entries. An
extractor walks the tuple top to bottom and keeps the first non-empty
value. Platform-provided meta tags come first, semantic page elements
last. Rules are plain data: the DOM surface resolves them with CSS
queries, the raw-HTML surface with text patterns.
"""

from dataclasses import dataclass
from enum import Enum

from src.config.settings import Settings


class RuleKind(str, Enum):
    """How a rule locates its value."""

    META_NAME = "meta_name"              # <meta name=target content=...>
    META_PROPERTY = "meta_property"      # <meta property=target content=...>
    ELEMENT_TEXT = "element_text"        # text of the element with id=target
    ELEMENT_ATTR = "element_attr"        # attr of the element with id=target
    DATA_ATTR = "data_attr"              # first element carrying attr
    DYNAMIC_IMAGE_MAP = "dynamic_image"  # first key of a JSON image map attr
    JSON_LD_IMAGE = "json_ld_image"      # "image" of a ld+json block
    CLASS_IMG_SRC = "class_img_src"      # src of <img> with class target
    SELECTOR_TEXT = "selector_text"      # text of a CSS selector match
    COMPOSED_PRICE = "composed_price"    # whole + fraction under target
    SYMBOL_PRICE = "symbol_price"        # symbol + whole anywhere


@dataclass(frozen=True)
class FieldRule:
    """A single candidate lookup ("tier") in a field's fallback chain."""

    kind: RuleKind
    target: str = ""
    attr: str = ""
    max_length: int | None = None


REQUIRED_FIELDS: tuple[str, ...] = ("title", "image", "description")

TITLE_RULES: tuple[FieldRule, ...] = (
    FieldRule(RuleKind.META_NAME, "title"),
    FieldRule(RuleKind.META_PROPERTY, "og:title"),
    FieldRule(RuleKind.ELEMENT_TEXT, "productTitle"),
)

DESCRIPTION_RULES: tuple[FieldRule, ...] = (
    FieldRule(RuleKind.META_NAME, "description"),
    FieldRule(RuleKind.META_PROPERTY, "og:description"),
    FieldRule(
        RuleKind.ELEMENT_TEXT,
        "feature-bullets",
        max_length=Settings.DESCRIPTION_MAX_LENGTH,
    ),
)

DOM_IMAGE_RULES: tuple[FieldRule, ...] = (
    FieldRule(RuleKind.ELEMENT_ATTR, "landingImage", attr="src"),
    FieldRule(RuleKind.META_PROPERTY, "og:image"),
)

HTML_IMAGE_RULES: tuple[FieldRule, ...] = (
    FieldRule(RuleKind.ELEMENT_ATTR, "landingImage", attr="src"),
    FieldRule(RuleKind.DATA_ATTR, attr="data-old-hires"),
    FieldRule(RuleKind.DYNAMIC_IMAGE_MAP, attr="data-a-dynamic-image"),
    FieldRule(RuleKind.JSON_LD_IMAGE),
    FieldRule(RuleKind.CLASS_IMG_SRC, "a-dynamic-image"),
)

# Tier 1 is preferred: the screen-reader copy holds the complete,
# pre-formatted price string.
CORE_PRICE_CONTAINER = "#corePriceDisplay_desktop_feature_div"

DOM_PRICE_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        RuleKind.SELECTOR_TEXT,
        f'{CORE_PRICE_CONTAINER} .a-price[data-a-color="price"] .a-offscreen',
    ),
    FieldRule(RuleKind.SELECTOR_TEXT, "#corePrice_desktop .a-price .a-offscreen"),
    FieldRule(RuleKind.SELECTOR_TEXT, "#apex_desktop .a-price .a-offscreen"),
    FieldRule(RuleKind.ELEMENT_TEXT, "priceblock_ourprice"),
    FieldRule(RuleKind.ELEMENT_TEXT, "priceblock_dealprice"),
    FieldRule(RuleKind.ELEMENT_TEXT, "price_inside_buybox"),
    FieldRule(RuleKind.COMPOSED_PRICE, CORE_PRICE_CONTAINER),
)

# Container scoping is not re-derivable from a raw string
HTML_PRICE_RULES: tuple[FieldRule, ...] = (
    FieldRule(RuleKind.SYMBOL_PRICE),
)

DOM_FIELD_RULES: dict[str, tuple[FieldRule, ...]] = {
    "title": TITLE_RULES,
    "image": DOM_IMAGE_RULES,
    "description": DESCRIPTION_RULES,
}

HTML_FIELD_RULES: dict[str, tuple[FieldRule, ...]] = {
    "title": TITLE_RULES,
    "image": HTML_IMAGE_RULES,
    "description": DESCRIPTION_RULES,
}
