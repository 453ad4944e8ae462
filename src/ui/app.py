# src/ui/app.py

"""Terminal UI for generating Amazon link cards."""

import asyncio
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Static,
    TextArea,
)

from src.config.settings import Settings
from src.filters.url_normalizer import validate
from src.models.errors import LinkCardError
from src.models.link_card_state import LinkCardState
from src.services.metadata_fetcher import MetadataFetcher
from src.storage.credential_store import CredentialStore

logger = logging.getLogger("link_card.ui")


class LinkCardApp(App[object]):
    """Terminal UI for generating Amazon link cards."""

    CSS = """
    #url_bar, #cookie_bar { height: auto; }
    #url_input, #cookie_input { width: 1fr; }
    #status { padding: 0 1; }
    #card_code { height: 1fr; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("c", "copy_card", "Copy card"),
        Binding("d", "delete_cookie", "Forget cookie"),
    ]

    def __init__(
        self,
        fetcher: MetadataFetcher | None = None,
        store: CredentialStore | None = None,
    ) -> None:
        super().__init__()
        self.state = LinkCardState()
        self.fetcher = fetcher or MetadataFetcher()
        self.store = store or CredentialStore()

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🔗 Amazon Link Card Generator", id="title"),
            Horizontal(
                Input(
                    placeholder="https://www.amazon.co.jp/dp/...",
                    id="url_input",
                ),
                Button("Generate", variant="primary", id="generate_btn"),
                id="url_bar",
            ),
            Horizontal(
                Input(
                    placeholder="Amazon cookie (only needed when blocked)",
                    password=True,
                    id="cookie_input",
                ),
                Button("Save cookie", id="save_cookie_btn"),
                id="cookie_bar",
            ),
            Static("Ready", id="status"),
            TextArea("", read_only=True, id="card_code"),
            id="main_container",
        )
        yield Footer()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "generate_btn":
            await self.generate_card()
        elif event.button.id == "save_cookie_btn":
            self.save_cookie()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in the URL input."""
        if event.input.id == "url_input":
            await self.generate_card()

    def _render_state(self) -> None:
        status = self.query_one("#status", Static)
        code = self.query_one("#card_code", TextArea)
        if self.state.is_loading:
            status.update(f"⏳ Fetching {self.state.url}...")
        elif self.state.error:
            status.update(f"❌ {self.state.error}")
        elif self.state.metadata is not None:
            price = self.state.metadata.price or "no price"
            status.update(f"✅ {self.state.metadata.title[:60]} ({price})")
        else:
            status.update("Ready")
        code.load_text(self.state.html_code)

    async def generate_card(self) -> None:
        """Fetch metadata for the entered URL and render its card."""
        url = self.query_one("#url_input", Input).value.strip()
        if not url:
            self.notify("Please enter an Amazon URL", severity="warning")
            return

        check = validate(url)
        if not check.valid:
            self.notify(check.reason or "Invalid URL", severity="error")
            return

        self.state = self.state.set_url(url).begin_fetch()
        self._render_state()

        typed_cookie = self.query_one("#cookie_input", Input).value.strip()
        credential = typed_cookie or self.store.load()
        try:
            metadata = await asyncio.to_thread(
                self.fetcher.fetch_and_extract, url, credential
            )
        except LinkCardError as exc:
            logger.error("Card generation failed for %s: %s", url, exc)
            self.state = self.state.fail_with(exc.user_message)
            self._render_state()
            self.notify(exc.user_message, severity="error")
            return

        self.state = self.state.succeed_with(metadata)
        self._render_state()
        self.notify("Link card generated")

    def save_cookie(self) -> None:
        """Persist the cookie typed into the cookie field."""
        value = self.query_one("#cookie_input", Input).value.strip()
        if not value:
            self.notify("Enter a cookie first", severity="warning")
            return
        self.store.save(value, Settings.COOKIE_EXPIRY_DAYS)
        self.notify("Cookie saved")

    def action_copy_card(self) -> None:
        """Copy the generated card markup to the clipboard."""
        if not self.state.html_code:
            self.notify("Nothing to copy yet", severity="warning")
            return
        self.copy_to_clipboard(self.state.html_code)
        self.notify("Link card copied to clipboard")

    def action_delete_cookie(self) -> None:
        """Delete the saved session cookie."""
        self.store.delete()
        self.notify("Cookie deleted")
