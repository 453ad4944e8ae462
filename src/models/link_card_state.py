# src/models/link_card_state.py

"""Explicit UI state for the link-card generator screens."""

from dataclasses import dataclass, replace

from src.models.metadata import ProductMetadata
from src.services.card_renderer import render_card


@dataclass(frozen=True)
class LinkCardState:
    """Snapshot of the generator UI; every update returns a new snapshot."""

    url: str = ""
    metadata: ProductMetadata | None = None
    html_code: str = ""
    is_loading: bool = False
    error: str | None = None

    def set_url(self, url: str) -> "LinkCardState":
        """Record a new input URL and clear the previous outcome."""
        return LinkCardState(url=url)

    def begin_fetch(self) -> "LinkCardState":
        return replace(self, is_loading=True, error=None)

    def succeed_with(self, metadata: ProductMetadata) -> "LinkCardState":
        """Store *metadata* and its rendered card markup."""
        return replace(
            self,
            metadata=metadata,
            html_code=render_card(metadata),
            is_loading=False,
            error=None,
        )

    def fail_with(self, error: str) -> "LinkCardState":
        return replace(
            self,
            metadata=None,
            html_code="",
            is_loading=False,
            error=error,
        )
