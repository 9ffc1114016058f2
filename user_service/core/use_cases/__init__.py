from .manage_users import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    UserUseCase,
    normalize_pagination,
    total_pages,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "UserUseCase",
    "normalize_pagination",
    "total_pages",
]
