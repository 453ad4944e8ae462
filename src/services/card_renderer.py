# src/services/card_renderer.py

"""Render :class:`ProductMetadata` as a self-contained HTML link card.

The card uses inline styles only, plus one ``<style>`` block holding the
narrow-viewport rule, so it can be pasted into a CMS HTML embed without
any external stylesheet.
"""

from src.config.settings import Settings
from src.models.metadata import ProductMetadata

_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),  # must run first
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(text: str) -> str:
    """Escape the five HTML-significant characters in *text*."""
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


def _cta() -> str:
    return (
        '<span style="font-size: 12px; color: #0066c0; font-weight: 500;">\n'
        f"          {escape_html(Settings.CARD_CTA_TEXT)}\n"
        "        </span>"
    )


def _footer(price: str | None) -> str:
    if not price:
        return (
            '<div style="text-align: right;">\n'
            f"        {_cta()}\n"
            "      </div>"
        )
    return (
        '<div style="display: flex; align-items: center; '
        'justify-content: space-between;">\n'
        '        <span style="font-size: 18px; font-weight: 700; color: #B12704;">\n'
        f"          {escape_html(price)}\n"
        "        </span>\n"
        f"        {_cta()}\n"
        "      </div>"
    )


def render_card(metadata: ProductMetadata) -> str:
    """Return the embeddable card markup for *metadata*.

    Pure and total: every field is escaped before interpolation, the
    price row is emitted only when a price exists, and the result carries
    no leading or trailing whitespace.
    """
    url = escape_html(metadata.url)
    image = escape_html(metadata.image)
    title = escape_html(metadata.title)
    description = escape_html(metadata.description)
    breakpoint_px = Settings.CARD_BREAKPOINT_PX

    markup = f"""
<div class="amazon-link-card" style="
  max-width: 600px;
  border: 1px solid #ddd;
  border-radius: 8px;
  overflow: hidden;
  display: flex;
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
  box-shadow: 0 2px 8px rgba(0,0,0,0.1);
  margin: 20px auto;
">
  <a href="{url}"
     target="_blank"
     rel="noopener noreferrer"
     style="text-decoration: none; color: inherit; display: flex; flex-direction: row;">

    <div style="flex: 0 0 180px; background: #f7f7f7; display: flex; align-items: center; justify-content: center; padding: 16px;">
      <img src="{image}"
           alt="{title}"
           style="max-width: 100%; max-height: 200px; object-fit: contain;">
    </div>

    <div style="flex: 1; padding: 16px; display: flex; flex-direction: column; justify-content: space-between;">
      <div>
        <div style="margin: 0 0 8px 0; font-size: 16px; font-weight: 600; line-height: 1.4; color: #111;">
          {title}
        </div>
        <p style="margin: 0 0 12px 0; font-size: 14px; color: #666; line-height: 1.5;">
          {description}
        </p>
      </div>

      {_footer(metadata.price)}
    </div>
  </a>
</div>

<style>
@media (max-width: {breakpoint_px}px) {{
  .amazon-link-card a {{
    flex-direction: column !important;
  }}
  .amazon-link-card a > div:first-child {{
    flex: 0 0 auto !important;
    padding: 20px !important;
  }}
}}
</style>
"""
    return markup.strip()
