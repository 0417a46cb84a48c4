from .connection import (
    engine,
    async_session,
    get_db_session,
    get_db,
    init_models,
    test_connection,
    get_schema_info,
    check_data_integrity,
    cleanup,
)

__all__ = [
    "engine",
    "async_session",
    "get_db_session",
    "get_db",
    "init_models",
    "test_connection",
    "get_schema_info",
    "check_data_integrity",
    "cleanup",
]
