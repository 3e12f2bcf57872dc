from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable

from bom_tree.errors import BOMTreeError

logger = logging.getLogger(__name__)

ServiceResult = dict[str, Any]


def make_result(
    ok: bool,
    data: dict[str, Any] | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
    error_type: str | None = None,
) -> ServiceResult:
    return {
        "ok": ok,
        "data": data or {},
        "errors": errors or [],
        "warnings": warnings or [],
        "error_type": error_type,
    }


def ok_result(data: dict[str, Any] | None = None, warnings: list[str] | None = None) -> ServiceResult:
    return make_result(ok=True, data=data, warnings=warnings)


def err_result(
    errors: list[str] | str,
    data: dict[str, Any] | None = None,
    error_type: str | None = None,
) -> ServiceResult:
    if isinstance(errors, str):
        errors = [errors]
    return make_result(ok=False, data=data, errors=errors, error_type=error_type)


def error_to_result(exc: BOMTreeError) -> ServiceResult:
    return err_result(str(exc), data=exc.details(), error_type=exc.error_type)


def service_guard(func: Callable[..., ServiceResult]) -> Callable[..., ServiceResult]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> ServiceResult:
        try:
            return func(*args, **kwargs)
        except BOMTreeError as exc:
            logger.info("%s rejected: %s", func.__name__, exc)
            return error_to_result(exc)
        except Exception as exc:  # pragma: no cover - safety boundary for the UI
            logger.exception("%s failed unexpectedly", func.__name__)
            return err_result(f"{func.__name__} failed: {exc}", error_type="InternalError")

    return wrapper
