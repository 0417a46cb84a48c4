import os

import sentry_sdk

from backoffice.core.errors import AppError

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _is_sentry_enabled() -> bool:
    return os.getenv("SENTRY_ENABLED", "false").strip().lower() in _TRUE_VALUES


def _is_client_error(hint: dict) -> bool:
    exc_info = hint.get("exc_info") if hint else None
    if not exc_info:
        return False
    exc = exc_info[1]
    return isinstance(exc, AppError) and exc.status_code < 500


def _before_send(event: dict, hint: dict):
    # 4xx (неверная дата, нет заказа и т.п.) в Sentry не отправляем
    if _is_client_error(hint):
        return None
    return event


def init_sentry(service_name: str) -> None:
    """Initialize Sentry SDK once at application startup."""
    if not _is_sentry_enabled():
        return

    dsn = os.getenv("SENTRY_DSN", "").strip()
    if not dsn:
        return

    traces_sample_rate = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "1.0"))

    sentry_sdk.init(
        dsn=dsn,
        send_default_pii=True,
        traces_sample_rate=traces_sample_rate,
        environment=os.getenv("SENTRY_ENVIRONMENT", os.getenv("ENVIRONMENT", "production")),
        release=os.getenv("SENTRY_RELEASE"),
        server_name=service_name,
        before_send=_before_send,
    )
