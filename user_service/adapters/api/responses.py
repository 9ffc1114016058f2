# user_service/adapters/api/responses.py
from typing import Any, Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from user_service.core.domain.exceptions import DomainError, ErrorKind
from user_service.core.use_cases.manage_users import total_pages

# HTTP status per error kind; anything unlisted is a server-side failure.
STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_NAME: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
}

# Client-facing message per error kind. Server-side kinds fall back to the
# operation-specific "Failed to ..." message.
MESSAGE_BY_KIND: Dict[ErrorKind, str] = {
    ErrorKind.INVALID_ID: "Invalid user ID",
    ErrorKind.INVALID_NAME: "Invalid user data",
    ErrorKind.INVALID_EMAIL: "Invalid user data",
    ErrorKind.NOT_FOUND: "User not found",
    ErrorKind.ALREADY_EXISTS: "User with this email already exists",
    ErrorKind.EMAIL_TAKEN: "User with this email already exists",
    ErrorKind.DEADLINE_EXCEEDED: "Request timeout",
}


def envelope(
    success: bool,
    message: str,
    data: Any = None,
    error: Any = None,
) -> Dict[str, Any]:
    """Builds the standard response body; `data` and `error` are omitted when None."""
    body: Dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


def success(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(True, message, data=data))


def created(message: str, data: Any = None) -> JSONResponse:
    return success(message, data=data, status_code=status.HTTP_201_CREATED)


def failure(status_code: int, message: str, error: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(False, message, error=error))


def paginated(items: list, total: int, page: int, page_size: int) -> Dict[str, Any]:
    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages(total, page_size),
    }


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def from_domain_error(exc: DomainError, fallback_message: str) -> JSONResponse:
    """
    Translates a DomainError into an error envelope.

    The error payload carries the kind and the domain message only; no
    stack traces or storage internals beyond the message are returned.
    """
    return failure(
        status_for(exc.kind),
        MESSAGE_BY_KIND.get(exc.kind, fallback_message),
        error={"code": exc.kind.value, "detail": exc.message},
    )
