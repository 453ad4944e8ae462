# tests/test_card_renderer.py

"""Tests for the embeddable link-card renderer."""

import re
import unittest

from src.models.metadata import ProductMetadata
from src.services.card_renderer import escape_html, render_card

_STYLE_BLOCK = re.compile(r"<style>[\s\S]*?</style>")


def _metadata(**overrides: str | None) -> ProductMetadata:
    """Build a ProductMetadata with sensible defaults."""
    fields: dict[str, str | None] = {
        "title": "テスト商品名",
        "description": "これはテスト用の商品説明です。",
        "image": "https://example.com/image.jpg",
        "price": "¥1,980",
        "url": "https://www.amazon.co.jp/dp/B0DP6MYX5Y",
    }
    fields.update(overrides)
    return ProductMetadata(**fields)  # type: ignore[arg-type]


class TestRenderCard(unittest.TestCase):
    """Structure of the rendered card."""

    def test_contains_all_fields_with_price(self) -> None:
        """Every field and the responsive rule appear in the output."""
        html = render_card(_metadata())

        self.assertIn("amazon-link-card", html)
        self.assertIn("テスト商品名", html)
        self.assertIn("これはテスト用の商品説明です。", html)
        self.assertIn('src="https://example.com/image.jpg"', html)
        self.assertIn("¥1,980", html)
        self.assertIn('href="https://www.amazon.co.jp/dp/B0DP6MYX5Y"', html)
        self.assertIn("Amazonで見る", html)
        self.assertIn("@media (max-width: 600px)", html)
        self.assertNotIn("text-align: right;", html)

    def test_no_price_variant(self) -> None:
        """Absent price → no currency symbol, right-aligned CTA only."""
        html = render_card(_metadata(price=None))

        self.assertNotIn("¥", html)
        self.assertNotIn("#B12704", html)
        self.assertIn("text-align: right;", html)
        self.assertIn("Amazonで見る", html)

    def test_output_is_trimmed(self) -> None:
        """No leading or trailing whitespace."""
        html = render_card(_metadata())
        self.assertEqual(html, html.strip())
        self.assertTrue(html.startswith('<div class="amazon-link-card"'))
        self.assertTrue(html.endswith("</style>"))

    def test_single_style_block_and_no_external_css(self) -> None:
        """Exactly one embedded style block and no stylesheet link."""
        html = render_card(_metadata())
        self.assertEqual(len(_STYLE_BLOCK.findall(html)), 1)
        self.assertNotIn("<link", html)
        self.assertNotIn("stylesheet", html)

    def test_deterministic(self) -> None:
        """The same input always renders the same markup."""
        metadata = _metadata()
        self.assertEqual(render_card(metadata), render_card(metadata))


class TestRenderEscaping(unittest.TestCase):
    """Injection safety."""

    def test_escape_html_all_five(self) -> None:
        """& < > \" ' are all escaped, ampersand first."""
        self.assertEqual(
            escape_html("& < > \" '"), "&amp; &lt; &gt; &quot; &#039;"
        )
        self.assertEqual(escape_html("&lt;"), "&amp;lt;")

    def test_script_in_title_escaped(self) -> None:
        """A script tag in the title never appears raw."""
        html = render_card(
            _metadata(title='<script>alert("XSS")</script>商品名')
        )
        self.assertIn("&lt;script&gt;", html)
        self.assertIn("&lt;/script&gt;", html)
        self.assertNotIn("<script>", _STYLE_BLOCK.sub("", html))

    def test_attribute_breakout_escaped(self) -> None:
        """Quotes in href/src cannot close the attribute."""
        html = render_card(
            _metadata(
                url='https://a.example/" onmouseover="alert(1)',
                image="x' onerror='alert(1)",
            )
        )
        self.assertIn(
            'href="https://a.example/&quot; onmouseover=&quot;alert(1)"', html
        )
        self.assertIn('src="x&#039; onerror=&#039;alert(1)"', html)

    def test_every_field_escaped_simultaneously(self) -> None:
        """All five fields carrying payloads are escaped at once."""
        payload = "<b>&\"'</b>"
        html = render_card(
            _metadata(
                title=f"t{payload}",
                description=f"d{payload}",
                image=f"i{payload}",
                price=f"p{payload}",
                url=f"u{payload}",
            )
        )
        escaped = "&lt;b&gt;&amp;&quot;&#039;&lt;/b&gt;"
        for prefix in ("t", "d", "i", "p", "u"):
            with self.subTest(field=prefix):
                self.assertIn(f"{prefix}{escaped}", html)
        self.assertNotIn("<b>", html)


if __name__ == "__main__":
    unittest.main()
