"""
Response envelope for the caller-facing surface.

Every session operation answers with the same shape: ``success`` plus either
the operation's data or an error message, and an HTTP-style status.
"""

from dataclasses import dataclass, field
from typing import Any

from repodesk.exceptions import RepoDeskError


@dataclass
class ResponseEnvelope:
    """Uniform result of a session operation."""

    success: bool
    status: int = 200
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    code: str | None = None

    @classmethod
    def ok(cls, data: dict[str, Any] | None = None, status: int = 200) -> "ResponseEnvelope":
        return cls(success=True, status=status, data=data if data is not None else {})

    @classmethod
    def from_error(cls, error: RepoDeskError) -> "ResponseEnvelope":
        """Build a failure envelope whose status matches the error kind."""
        return cls(
            success=False,
            status=error.status,
            error=error.message,
            code=error.code,
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the JSON body returned to callers.

        Returns:
            ``{"success": True, **data}`` or
            ``{"success": False, "error": ..., "code": ...}``
        """
        if self.success:
            return {"success": True, **self.data}
        return {"success": False, "error": self.error, "code": self.code}
