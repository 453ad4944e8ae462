# src/scrapers/html_extractor.py

"""Metadata extraction over a raw HTML string using text patterns.

Used server-side on fetched markup, where building a full document tree
is not required. Values captured from attributes and text are
entity-decoded so the renderer's escaping is applied exactly once.
"""

import html
import json
import re

from src.config.settings import Settings
from src.scrapers.base_extractor import MetadataExtractor, collapse_whitespace
from src.scrapers.field_rules import (
    HTML_FIELD_RULES,
    HTML_PRICE_RULES,
    FieldRule,
    RuleKind,
)

_TAG_RE = re.compile(r"<[^>]+>")
_JSON_LD_RE = re.compile(
    r"<script[^>]*type=[\"']application/ld\+json[\"'][^>]*>(.*?)</script>",
    re.IGNORECASE | re.DOTALL,
)
_PRICE_WHOLE_RE = re.compile(r"class=[\"']a-price-whole[\"']>([^<]+)<")
_PRICE_SYMBOL_RE = re.compile(r"class=[\"']a-price-symbol[\"']>([^<]+)<")


def _meta_patterns(attr: str, key: str) -> tuple[re.Pattern[str], ...]:
    """Patterns for ``<meta attr=key content=...>`` in either attribute order."""
    key_re = re.escape(key)
    return (
        re.compile(
            rf"<meta[^>]*(?<![\w-]){attr}\s*=\s*[\"']{key_re}[\"'][^>]*"
            r"(?<![\w-])content\s*=\s*(\"[^\"]*\"|'[^']*')",
            re.IGNORECASE,
        ),
        re.compile(
            r"<meta[^>]*(?<![\w-])content\s*=\s*(\"[^\"]*\"|'[^']*')[^>]*"
            rf"(?<![\w-]){attr}\s*=\s*[\"']{key_re}[\"']",
            re.IGNORECASE,
        ),
    )


def _attr_value(tag: str, attr: str) -> str:
    """Return the decoded value of *attr* inside a single start tag."""
    match = re.search(
        rf"(?<![\w-]){re.escape(attr)}\s*=\s*(\"[^\"]*\"|'[^']*')",
        tag,
        re.IGNORECASE,
    )
    if not match:
        return ""
    return html.unescape(match.group(1)[1:-1])


class HtmlExtractor(MetadataExtractor):
    """Extract metadata from fetched product-page markup."""

    surface = "html"
    field_rules = HTML_FIELD_RULES
    price_rules = HTML_PRICE_RULES

    def __init__(self, markup: str) -> None:
        super().__init__()
        self.markup = markup
        self._prefix_res = [
            re.compile(rf"^{re.escape(prefix)}\s*", re.IGNORECASE)
            for prefix in Settings.STOREFRONT_PREFIXES
        ]

    def _postprocess(self, field_name: str, value: str) -> str:
        value = value.strip()
        if field_name in ("title", "description"):
            # Applied in order, so "Amazon.co.jp: Amazon.com: X" becomes "X"
            for prefix_re in self._prefix_res:
                value = prefix_re.sub("", value)
        return value

    def _apply_rule(self, rule: FieldRule) -> str:
        kind = rule.kind

        if kind is RuleKind.META_NAME:
            return self._meta_content("name", rule.target)
        if kind is RuleKind.META_PROPERTY:
            return self._meta_content("property", rule.target)
        if kind is RuleKind.ELEMENT_TEXT:
            return self._element_text(rule.target)
        if kind is RuleKind.ELEMENT_ATTR:
            return _attr_value(self._start_tag_with_id(rule.target), rule.attr)
        if kind is RuleKind.DATA_ATTR:
            return self._first_attr(rule.attr)
        if kind is RuleKind.DYNAMIC_IMAGE_MAP:
            return self._first_dynamic_image(rule.attr)
        if kind is RuleKind.JSON_LD_IMAGE:
            return self._json_ld_image()
        if kind is RuleKind.CLASS_IMG_SRC:
            return self._class_img_src(rule.target)
        if kind is RuleKind.SYMBOL_PRICE:
            return self._symbol_price()

        self.logger.debug(
            "[html] Rule kind %s is not evaluable on raw markup", kind.value
        )
        return ""

    def _meta_content(self, attr: str, key: str) -> str:
        for pattern in _meta_patterns(attr, key):
            match = pattern.search(self.markup)
            if match:
                value = html.unescape(match.group(1)[1:-1])
                if value:
                    return value
        return ""

    def _start_tag_with_id(self, element_id: str) -> str:
        match = re.search(
            rf"<[a-zA-Z][^>]*(?<![\w-])id\s*=\s*[\"']"
            rf"{re.escape(element_id)}[\"'][^>]*>",
            self.markup,
        )
        return match.group(0) if match else ""

    def _element_text(self, element_id: str) -> str:
        """Text content of the element with *element_id*, nested tags included."""
        start = re.search(
            rf"<([a-zA-Z][\w-]*)[^>]*(?<![\w-])id\s*=\s*[\"']"
            rf"{re.escape(element_id)}[\"'][^>]*>",
            self.markup,
        )
        if not start:
            return ""
        name = start.group(1)
        if start.group(0).endswith("/>"):
            return ""

        # Track same-name open/close tags so nested elements stay inside
        depth = 1
        tag_re = re.compile(
            rf"<(/?){re.escape(name)}(?=[\s/>])[^>]*>", re.IGNORECASE
        )
        for tag in tag_re.finditer(self.markup, start.end()):
            if tag.group(1):
                depth -= 1
            elif not tag.group(0).endswith("/>"):
                depth += 1
            if depth == 0:
                inner = self.markup[start.end() : tag.start()]
                return collapse_whitespace(
                    html.unescape(_TAG_RE.sub(" ", inner))
                )
        self.logger.debug("[html] Unclosed #%s element skipped", element_id)
        return ""

    def _first_attr(self, attr: str) -> str:
        match = re.search(
            rf"(?<![\w-]){re.escape(attr)}\s*=\s*(\"[^\"]+\"|'[^']+')",
            self.markup,
        )
        return html.unescape(match.group(1)[1:-1]) if match else ""

    def _first_dynamic_image(self, attr: str) -> str:
        raw = self._first_attr(attr)
        if not raw.startswith("{"):
            return ""
        try:
            images = json.loads(raw)
        except json.JSONDecodeError:
            self.logger.debug("[html] Undecodable %s value skipped", attr)
            return ""
        if isinstance(images, dict) and images:
            return str(next(iter(images)))
        return ""

    def _json_ld_image(self) -> str:
        for block in _JSON_LD_RE.findall(self.markup):
            try:
                data = json.loads(block)
            except json.JSONDecodeError:
                continue
            image = data.get("image") if isinstance(data, dict) else None
            if isinstance(image, list):
                image = image[0] if image else None
            if isinstance(image, str) and image:
                return image
        return ""

    def _class_img_src(self, class_name: str) -> str:
        for tag in re.findall(r"<img\b[^>]*>", self.markup, re.IGNORECASE):
            classes = _attr_value(tag, "class").split()
            if class_name in classes:
                src = _attr_value(tag, "src")
                if src:
                    return src
        return ""

    def _symbol_price(self) -> str:
        whole_match = _PRICE_WHOLE_RE.search(self.markup)
        whole = html.unescape(whole_match.group(1)).strip() if whole_match else ""
        if not whole:
            return ""
        symbol_match = _PRICE_SYMBOL_RE.search(self.markup)
        currency = (
            html.unescape(symbol_match.group(1)).strip() if symbol_match else ""
        )
        return f"{currency or Settings.FALLBACK_CURRENCY}{whole}"
