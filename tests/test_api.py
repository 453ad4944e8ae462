# tests/test_api.py

"""Tests for the metadata HTTP endpoint using FastAPI's TestClient."""

import unittest
from unittest.mock import MagicMock

import httpx
from fastapi.testclient import TestClient

from src.api.app import METADATA_PATH, create_app
from src.models.errors import ErrorKind, FetchError
from src.models.metadata import ProductMetadata

PRODUCT_URL = "https://www.amazon.co.jp/dp/B0DP6MYX5Y"


class TestMetadataEndpoint(unittest.TestCase):
    """Request validation, success shape and error mapping."""

    def setUp(self) -> None:
        self.fetcher = MagicMock()
        self.client = TestClient(create_app(fetcher=self.fetcher))

    def _post(self, body: object) -> httpx.Response:
        return self.client.post(METADATA_PATH, json=body)

    def test_preflight(self) -> None:
        """OPTIONS returns 200, an empty body and CORS headers."""
        resp = self.client.options(METADATA_PATH)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.content, b"")
        self.assertEqual(resp.headers["access-control-allow-origin"], "*")
        self.assertIn("POST", resp.headers["access-control-allow-methods"])

    def test_missing_url(self) -> None:
        """No url → 400 and no upstream call."""
        resp = self._post({})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "URL is required"})
        self.fetcher.fetch_and_extract.assert_not_called()

    def test_invalid_url(self) -> None:
        """A non-Amazon URL is rejected before fetching."""
        resp = self._post({"url": "https://example.com/dp/B0DP6MYX5Y"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "INVALID_URL")
        self.assertEqual(resp.json()["message"], "Not an Amazon domain")
        self.fetcher.fetch_and_extract.assert_not_called()

    def test_success_with_price(self) -> None:
        """200 with the metadata record and CORS headers."""
        self.fetcher.fetch_and_extract.return_value = ProductMetadata(
            title="Kettle",
            image="https://img.example/k.jpg",
            description="A kettle.",
            url=PRODUCT_URL,
            price="¥3,280",
        )

        resp = self._post({"url": PRODUCT_URL, "cookie": "session-id=abc"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["price"], "¥3,280")
        self.assertEqual(resp.json()["url"], PRODUCT_URL)
        self.assertEqual(resp.headers["access-control-allow-origin"], "*")
        self.fetcher.fetch_and_extract.assert_called_once_with(
            PRODUCT_URL, "session-id=abc"
        )

    def test_success_without_price(self) -> None:
        """The price key is omitted when absent."""
        self.fetcher.fetch_and_extract.return_value = ProductMetadata(
            title="t", image="i", description="d", url=PRODUCT_URL
        )
        resp = self._post({"url": PRODUCT_URL})
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("price", resp.json())
        self.fetcher.fetch_and_extract.assert_called_once_with(
            PRODUCT_URL, None
        )

    def test_short_link_accepted(self) -> None:
        """Short links pass validation and are fetched as given."""
        self.fetcher.fetch_and_extract.return_value = ProductMetadata(
            title="t", image="i", description="d", url=PRODUCT_URL
        )
        resp = self._post({"url": "https://amzn.to/3L2dZGf"})
        self.assertEqual(resp.status_code, 200)

    def test_credential_required(self) -> None:
        """A bot block becomes 503 COOKIE_REQUIRED."""
        self.fetcher.fetch_and_extract.side_effect = FetchError(
            ErrorKind.CREDENTIAL_REQUIRED, status_code=503
        )
        resp = self._post({"url": PRODUCT_URL})
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()["error"], "COOKIE_REQUIRED")
        self.assertTrue(resp.json()["message"])

    def test_upstream_status_passed_through(self) -> None:
        """Other upstream failures keep their status code."""
        self.fetcher.fetch_and_extract.side_effect = FetchError(
            ErrorKind.FETCH_FAILED, status_code=404
        )
        resp = self._post({"url": PRODUCT_URL})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Failed to fetch Amazon page"})

    def test_parse_failure(self) -> None:
        """A missing required field is reported with its classification."""
        self.fetcher.fetch_and_extract.side_effect = FetchError(
            ErrorKind.PARSE_FAILED, field_kind=ErrorKind.TITLE_NOT_FOUND
        )
        resp = self._post({"url": PRODUCT_URL})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["error"], "PARSE_FAILED")
        self.assertEqual(resp.json()["field"], "TITLE_NOT_FOUND")

    def test_unknown_fetch_error(self) -> None:
        """Transport errors become a generic 500."""
        self.fetcher.fetch_and_extract.side_effect = FetchError(
            ErrorKind.UNKNOWN
        )
        resp = self._post({"url": PRODUCT_URL})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error"})

    def test_unexpected_exception(self) -> None:
        """Anything else also maps to 500."""
        self.fetcher.fetch_and_extract.side_effect = RuntimeError("boom")
        resp = self._post({"url": PRODUCT_URL})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error"})

    def test_malformed_body(self) -> None:
        """A body that is not JSON maps to 500."""
        resp = self.client.post(
            METADATA_PATH,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.headers["access-control-allow-origin"], "*")


if __name__ == "__main__":
    unittest.main()
