# src/services/metadata_fetcher.py

"""Remote product-page retrieval with bot-block classification."""

import logging

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import ErrorKind, ExtractionError, FetchError
from src.models.metadata import ProductMetadata
from src.scrapers.html_extractor import HtmlExtractor

logger = logging.getLogger("link_card.fetcher")

# The storefront answers automated traffic with 503 instead of a captcha page
BOT_BLOCK_STATUS = 503


class MetadataFetcher:
    """Fetch a product page and hand its markup to :class:`HtmlExtractor`.

    One request per call: no retries, no backoff and no caching. The
    session credential is passed per call and never read from storage.
    """

    def __init__(
        self,
        session: curl_requests.Session | None = None,
        affiliate_tag: str | None = None,
    ) -> None:
        self.settings = Settings()
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.affiliate_tag = (
            affiliate_tag
            if affiliate_tag is not None
            else self.settings.AFFILIATE_TAG
        )

    def _build_headers(self, credential: str | None) -> dict[str, str]:
        headers = dict(self.settings.DEFAULT_HEADERS)
        if credential:
            headers[self.settings.CREDENTIAL_HEADER] = credential
        return headers

    def fetch_and_extract(
        self, url: str, credential: str | None = None
    ) -> ProductMetadata:
        """Retrieve *url* and extract its product metadata.

        Redirects are followed, and the final URL (not *url*) becomes the
        record's ``url`` after normalisation.

        Raises:
            FetchError: ``CREDENTIAL_REQUIRED`` on a 503 bot block,
                ``FETCH_FAILED`` on any other non-2xx status,
                ``PARSE_FAILED`` when a required field is missing and
                ``UNKNOWN`` on transport failures.
        """
        logger.info(
            "Fetching %s (credential=%s)", url, "yes" if credential else "no"
        )
        try:
            resp = self.session.get(
                url,
                headers=self._build_headers(credential),
                allow_redirects=True,
            )
        except Exception as exc:
            logger.error("Transport error fetching %s: %s", url, exc, exc_info=True)
            raise FetchError(ErrorKind.UNKNOWN, str(exc)) from exc

        status = resp.status_code
        if status == BOT_BLOCK_STATUS:
            logger.warning("Bot block (HTTP %d) for %s", status, url)
            raise FetchError(
                ErrorKind.CREDENTIAL_REQUIRED,
                "Request rejected as automated traffic",
                status_code=status,
            )
        if not 200 <= status < 300:
            logger.warning("HTTP %d fetching %s", status, url)
            raise FetchError(
                ErrorKind.FETCH_FAILED,
                f"Upstream returned HTTP {status}",
                status_code=status,
            )

        final_url = str(resp.url or url)
        if final_url != url:
            logger.info("Redirected %s -> %s", url, final_url)

        try:
            return HtmlExtractor(resp.text).extract(final_url, self.affiliate_tag)
        except ExtractionError as exc:
            raise FetchError(
                ErrorKind.PARSE_FAILED,
                str(exc),
                status_code=status,
                field_kind=exc.kind,
            ) from exc
