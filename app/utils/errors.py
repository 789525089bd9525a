"""Operational error types shared by the service layer.

Every error here carries the HTTP status it maps to, so the routers can hand
any of them to ``handle_exception`` without knowing which one was raised.
"""

import functools
import logging

from fastapi import status

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__("Validation failed: " + ", ".join(self.violations))


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class RateLimitError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, retry_after_minutes: int):
        super().__init__(message)
        self.retry_after_minutes = retry_after_minutes


class ExpiredError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class LockedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class DeliveryError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServiceError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def service_operation(name: str):
    """Wrap unexpected failures of a service call as ``ServiceError``.

    ``AppError`` subclasses pass through untouched; anything else is logged
    with its traceback and re-raised as ``"<name> Error: <cause>"``.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except AppError:
                raise
            except Exception as exc:
                logger.exception("%s failed", name)
                raise ServiceError(f"{name} Error: {exc}") from exc

        return wrapper

    return decorator
