"""
Common Pydantic models shared across the application.
"""

from datetime import datetime, timezone
from typing import Literal
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body for failures not reported as an ExportResult."""

    status: Literal["error"] = "error"
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict | None = Field(None, description="Additional error context")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: str | None = Field(None, description="Unique request identifier")


class ExportResult(BaseModel):
    """Outcome of a single label export."""

    status: Literal["success", "failed"]
    size: Literal["outer", "inner"] | None = Field(None, description="Label size, once a layout was captured")
    file_name: str | None = None
    file_path: str | None = None
    error_code: str | None = Field(None, description="Machine-readable failure code")
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"
