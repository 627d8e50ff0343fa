"""ApiResponse envelope returned by every endpoint, the payment webhook included.

    {"code": 0, "message": "success", "data": {...}, "warning": null,
     "timestamp": "...", "request_id": "req_..."}

``code`` is 0 on success and the AppError code otherwise; ``data`` is null on
error. ``warning`` carries a best-effort step that failed after the main
operation already succeeded, such as a payment session that could not be opened.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    warning: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(
    data: Any = None, message: str = "success", warning: str | None = None
) -> ApiResponse:
    return ApiResponse(message=message, data=data, warning=warning)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message)
