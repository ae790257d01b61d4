import pytest
from sqlalchemy.exc import OperationalError

from devkit.db import AsyncDatabaseManager, is_transient_db_error, normalize_database_url


def test_normalize_database_url() -> None:
    assert normalize_database_url("postgresql://u:p@h:5432/db") == "postgresql+psycopg://u:p@h:5432/db"
    assert normalize_database_url("postgresql+psycopg://u:p@h:5432/db") == "postgresql+psycopg://u:p@h:5432/db"
    assert normalize_database_url("sqlite:///:memory:") == "sqlite+aiosqlite:///:memory:"


def test_transient_error_detection() -> None:
    assert is_transient_db_error(OperationalError("stmt", {}, Exception("down")))
    assert not is_transient_db_error(ValueError("nope"))


@pytest.mark.asyncio
async def test_run_in_transaction_does_not_retry_non_transient_errors() -> None:
    manager = AsyncDatabaseManager("sqlite:///:memory:", base_delay_seconds=0)
    calls = {"count": 0}

    async def fail(_conn):
        calls["count"] += 1
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        await manager.run_in_transaction(fail)

    assert calls["count"] == 1
    await manager.disconnect()
