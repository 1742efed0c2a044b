"""
Error types for tokken extraction.

Only configuration problems and failed design-tool API calls are errors.
Missing assets, unavailable variables and stale style declarations degrade
the output instead of raising.
"""

from __future__ import annotations

_STATUS_HINTS: dict[int, str] = {
    400: "Bad Request: check that your Figma URL and access token are correct",
    401: "Unauthorized: the access token was rejected",
    403: "Access Denied: check that your token has permission for this file",
    404: "File Not Found: verify the Figma URL is correct",
    429: "Rate Limit Exceeded: wait a few minutes and try again",
}


class TokkenError(Exception):
    """Base exception for all tokken errors."""

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


class ConfigError(TokkenError):
    """
    Raised when extraction cannot be configured.

    Examples:
    - Malformed Figma URL
    - Missing access token
    - Unreadable tokken.config.json
    """

    pass


class FigmaAPIError(TokkenError):
    """
    Raised when a design-tool API call fails for good.

    ``status_code`` is the HTTP status, or ``None`` when the request never
    got a response (connection refused, DNS failure, timeout).
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, hint=hint_for_status(status_code))

    @property
    def is_transient(self) -> bool:
        """True for rate limiting and server-side failures."""
        return self.status_code is not None and (
            self.status_code == 429 or self.status_code >= 500
        )


def hint_for_status(status_code: int | None) -> str:
    """Human-readable hint for an API failure status."""
    if status_code is None:
        return "Network error: check your connection and try again"
    if status_code in _STATUS_HINTS:
        return _STATUS_HINTS[status_code]
    if status_code >= 500:
        return "Figma server error: try again later"
    return f"Figma API returned status {status_code}"
