"""Uniform success/failure envelope returned by every public operation.

Operations never raise for transport or HTTP problems. They return either a
``Success`` or a ``Failure`` and callers branch on ``status``:

    ```python
    result = client.get_meeting("123")
    if result.status:
        print(result.data["topic"])
    else:
        print(result.message)
    ```

``to_dict()`` gives the plain ``{"status": ..., "data" | "message": ...}``
mapping for callers that pass envelopes straight through as JSON.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, TypeAlias


@dataclass(frozen=True)
class Success:
    """Successful call.

    ``data`` holds the decoded body (or the extracted item list). Operations
    whose success is signalled by an empty 204 response carry a confirmation
    ``message`` instead and leave ``data`` as ``None``.
    """

    data: Any = None
    message: str | None = None

    status: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        if self.message is not None and self.data is None:
            return {"status": True, "message": self.message}
        return {"status": True, "data": self.data}


@dataclass(frozen=True)
class Failure:
    """Failed call with a human-readable reason."""

    message: str

    status: ClassVar[bool] = False

    @property
    def data(self) -> None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"status": False, "message": self.message}


Result: TypeAlias = Success | Failure
