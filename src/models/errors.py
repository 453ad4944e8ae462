# src/models/errors.py

"""Error taxonomy for URL handling, extraction and fetching."""

from enum import Enum


class ErrorKind(str, Enum):
    """Classification attached to every link-card failure."""

    INVALID_URL = "INVALID_URL"
    TITLE_NOT_FOUND = "TITLE_NOT_FOUND"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    DESCRIPTION_NOT_FOUND = "DESCRIPTION_NOT_FOUND"
    CREDENTIAL_REQUIRED = "CREDENTIAL_REQUIRED"
    FETCH_FAILED = "FETCH_FAILED"
    PARSE_FAILED = "PARSE_FAILED"
    UNKNOWN = "UNKNOWN"


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_URL: "Please enter a valid Amazon product URL.",
    ErrorKind.TITLE_NOT_FOUND: "Could not find the product title.",
    ErrorKind.IMAGE_NOT_FOUND: "Could not find the product image.",
    ErrorKind.DESCRIPTION_NOT_FOUND: (
        "Could not find the product description."
    ),
    ErrorKind.CREDENTIAL_REQUIRED: (
        "Blocked by Amazon. Set your Amazon cookie and try again."
    ),
    ErrorKind.FETCH_FAILED: "Failed to fetch the Amazon page.",
    ErrorKind.PARSE_FAILED: "Failed to read product metadata.",
    ErrorKind.UNKNOWN: "An unexpected error occurred.",
}


def field_error_kind(field_name: str) -> ErrorKind:
    """Map a required field name to its ``*_NOT_FOUND`` classification."""
    return ErrorKind(f"{field_name.upper()}_NOT_FOUND")


class LinkCardError(Exception):
    """Base class for all classified link-card failures."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(detail or kind.value)

    @property
    def user_message(self) -> str:
        """Short, user-facing message for this failure."""
        return ERROR_MESSAGES[self.kind]


class InvalidURLError(LinkCardError):
    """The input could not be parsed or is not an Amazon product URL."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(ErrorKind.INVALID_URL, detail)


class ExtractionError(LinkCardError):
    """A required field could not be located by any rule in its chain."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            field_error_kind(field_name),
            f"No rule matched required field '{field_name}'",
        )


class FetchError(LinkCardError):
    """Remote retrieval failed; ``field_kind`` is set for parse failures."""

    def __init__(
        self,
        kind: ErrorKind,
        detail: str = "",
        status_code: int | None = None,
        field_kind: ErrorKind | None = None,
    ) -> None:
        self.status_code = status_code
        self.field_kind = field_kind
        super().__init__(kind, detail)

    @property
    def user_message(self) -> str:
        """Prefer the specific missing-field message for parse failures."""
        if self.field_kind is not None:
            return ERROR_MESSAGES[self.field_kind]
        return ERROR_MESSAGES[self.kind]
