"""
Order back office. Точка входа. Запуск: uvicorn backoffice.main:app --reload
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError

from backoffice.core.config import LOG_LEVEL
from backoffice.core.errors import AppError
from backoffice.core.sentry_setup import init_sentry
from backoffice.database.connection import (
    test_connection,
    get_schema_info,
    check_data_integrity,
    cleanup,
)

# Уровень логирования: задаётся через LOG_LEVEL (INFO, WARNING, ERROR).
_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

init_sentry("backoffice-api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения: старт — проверка БД, стоп — закрытие пула."""
    logger.info("Starting back office API...")
    ok = await test_connection()
    if not ok:
        logger.critical("Cannot start without database connection")
        raise RuntimeError("Database connection failed")
    await get_schema_info()
    await check_data_integrity()
    logger.info("Application startup complete")
    yield
    logger.info("Shutting down back office API...")
    await cleanup()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Order back office",
    description="API для управления заказами",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "success": False})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Неверная форма запроса (тело/параметры): 400 с первым сообщением pydantic."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error(400, message)


@app.exception_handler(IntegrityError)
@app.exception_handler(DataError)
async def db_error_handler(request: Request, exc: Exception):
    # Ссылка на несуществующую запись или значение не того типа
    logger.warning("%s %s: database rejected data: %s", request.method, request.url.path, exc)
    return _error(400, "Invalid data: rejected by database")


@app.get("/health")
async def health():
    """Проверка состояния сервиса."""
    return {"status": "ok"}


# Подключение роутеров API v1
from backoffice.api.v1.routers import auth, orders

app.include_router(auth.router, prefix="/api/v1", tags=["auth"])
app.include_router(orders.router, prefix="/api/v1", tags=["orders"])
