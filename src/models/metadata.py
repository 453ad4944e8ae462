# src/models/metadata.py

"""Product metadata record shared by the extractors and the renderer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProductMetadata:
    """Metadata for a single Amazon product page.

    ``price`` is a display string such as ``"¥1,980"`` and is the only
    field allowed to be absent.
    """

    title: str
    image: str
    description: str
    url: str
    price: str | None = None

    def __post_init__(self) -> None:
        for name in ("title", "image", "description", "url"):
            if not getattr(self, name):
                raise ValueError(f"ProductMetadata.{name} must not be empty")

    def to_dict(self) -> dict[str, str]:
        """Serialise to the JSON wire shape (``price`` omitted when absent)."""
        data = {
            "title": self.title,
            "image": self.image,
            "description": self.description,
            "url": self.url,
        }
        if self.price is not None:
            data["price"] = self.price
        return data
