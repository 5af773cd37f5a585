"""Zoom error body model."""

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class ErrorBody:
    """Error payload returned by the Zoom API.

    Zoom reports errors as ``{"code": 3001, "message": "Meeting does not exist: 123."}``,
    optionally with an ``errors`` list of ``{"field", "message"}`` items on validation
    failures.

    See: https://developers.zoom.us/docs/api/rest/error-definitions/
    """

    code: int | None = None  # Zoom-specific error code, not the HTTP status
    message: str | None = None
    errors: list[dict[str, Any]] | None = None

    # Any other members the API sent along
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ErrorBody | None":
        """Parse a Zoom error body from an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            ErrorBody object or None if the body is not a Zoom error payload
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            # JSON decode errors, type errors, or missing .json() method
            return None

        if not isinstance(data, dict):
            return None

        # Needs at least one of the standard members
        standard_fields = {"code", "message", "errors"}
        if not any(field in data for field in standard_fields):
            return None

        extensions = {k: v for k, v in data.items() if k not in standard_fields}

        return cls(
            code=data.get("code"),
            message=data.get("message"),
            errors=data.get("errors"),
            extensions=extensions if extensions else None,
        )

    def to_exception_message(self) -> str:
        """Convert the error body to an exception message."""
        lines = []

        if self.message and self.code is not None:
            lines.append(f"{self.message} (code {self.code})")
        elif self.message:
            lines.append(self.message)
        elif self.code is not None:
            lines.append(f"Zoom error code {self.code}")

        if self.errors:
            for error in self.errors:
                field = error.get("field", "?")
                lines.append(f"  - {field}: {error.get('message', '')}")

        return "\n".join(lines) if lines else "Unknown API error"
