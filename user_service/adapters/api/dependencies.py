# user_service/adapters/api/dependencies.py
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from user_service.core.domain.context import RequestContext
from user_service.core.use_cases.manage_users import UserUseCase
from user_service.shared.config import settings
from user_service.shared.container import Container


def get_request_context() -> RequestContext:
    """
    Per-request cancellation handle carrying the request deadline
    (REQUEST_TIMEOUT_SEC) down to every repository call.
    """
    if settings.REQUEST_TIMEOUT_SEC and settings.REQUEST_TIMEOUT_SEC > 0:
        return RequestContext.with_timeout(settings.REQUEST_TIMEOUT_SEC)
    return RequestContext.background()


@inject
def get_user_use_case(
    use_case: UserUseCase = Depends(Provide[Container.user_use_case]),
) -> UserUseCase:
    """Dependency to inject the UserUseCase interactor (container-managed)."""
    return use_case
