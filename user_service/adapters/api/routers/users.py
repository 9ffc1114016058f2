# user_service/adapters/api/routers/users.py
from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Depends, Path, Query, status

from user_service.adapters.api import responses
from user_service.adapters.api.dependencies import get_request_context, get_user_use_case
from user_service.adapters.api.schemas import UserCreateRequest, UserResponse, UserUpdateRequest
from user_service.core.domain.context import RequestContext
from user_service.core.domain.exceptions import DomainError
from user_service.core.domain.models import MAX_USER_ID
from user_service.core.use_cases.manage_users import (
    DEFAULT_PAGE_SIZE,
    UserUseCase,
    normalize_pagination,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/users", tags=["Users"])

UserID = Annotated[int, Path(ge=0, le=MAX_USER_ID, description="Numeric user id")]


def parse_int(raw: Optional[str], default: int) -> int:
    """Unparseable paging input falls back to the default instead of failing."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a User")
async def create_user(
    request: UserCreateRequest,
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    try:
        user = await use_case.create_user(ctx, request.to_domain())
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to create user")
    return responses.created("User created successfully", UserResponse.from_domain(user))


@router.get("", summary="List Users")
async def list_users(
    page: Optional[str] = Query(None, description="1-based page number; values below 1 become 1"),
    page_size: Optional[str] = Query(
        None,
        description="Items per page; values outside 1..100 fall back to the default",
    ),
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    """
    Returns one page of active (non-deleted) users, newest first.
    Out-of-range or unparseable paging values are coerced, never rejected.
    """
    page_no, size = parse_int(page, 1), parse_int(page_size, DEFAULT_PAGE_SIZE)
    try:
        users, total = await use_case.get_all_users(ctx, page_no, size)
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to retrieve users")

    page_no, size = normalize_pagination(page_no, size)
    items = [UserResponse.from_domain(u) for u in users]
    return responses.success(
        "Users retrieved successfully",
        responses.paginated(items, total, page_no, size),
    )


# Declared before /{user_id} so "lookup" is not parsed as an id.
@router.get("/lookup", summary="Find a User by email")
async def get_user_by_email(
    email: str = Query(..., description="Exact email address"),
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    try:
        user = await use_case.get_user_by_email(ctx, email)
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to retrieve user")
    return responses.success("User retrieved successfully", UserResponse.from_domain(user))


@router.get("/{user_id}", summary="Get a User")
async def get_user(
    user_id: UserID,
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    try:
        user = await use_case.get_user(ctx, user_id)
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to retrieve user")
    return responses.success("User retrieved successfully", UserResponse.from_domain(user))


@router.put("/{user_id}", summary="Replace a User")
async def update_user(
    request: UserUpdateRequest,
    user_id: UserID,
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    try:
        user = await use_case.update_user(ctx, user_id, request.to_domain())
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to update user")
    return responses.success("User updated successfully", UserResponse.from_domain(user))


@router.delete("/{user_id}", summary="Delete a User")
async def delete_user(
    user_id: UserID,
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    """Soft delete: the record is hidden from every read but kept in storage."""
    try:
        await use_case.delete_user(ctx, user_id)
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to delete user")
    return responses.success("User deleted successfully")


@router.put("/{user_id}/activate", summary="Activate a User")
async def activate_user(
    user_id: UserID,
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    try:
        user = await use_case.activate_user(ctx, user_id)
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to activate user")
    return responses.success("User activated successfully", UserResponse.from_domain(user))


@router.put("/{user_id}/deactivate", summary="Deactivate a User")
async def deactivate_user(
    user_id: UserID,
    ctx: RequestContext = Depends(get_request_context),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    try:
        user = await use_case.deactivate_user(ctx, user_id)
    except DomainError as e:
        return responses.from_domain_error(e, "Failed to deactivate user")
    return responses.success("User deactivated successfully", UserResponse.from_domain(user))
