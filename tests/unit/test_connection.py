from unittest.mock import patch

import pytest
from psycopg.conninfo import conninfo_to_dict

from budget_worker.config.settings import Settings
from budget_worker.database.connection import (
    build_conninfo,
    get_connection,
    init_pool,
)


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "db_host": "db.internal",
        "db_port": 6543,
        "db_database": "budget",
        "db_username": "worker",
        "db_password": "pa ss'word",
    }
    values.update(overrides)
    return Settings(**values)


class TestBuildConninfo:
    def test_includes_every_setting(self) -> None:
        params = conninfo_to_dict(build_conninfo(_settings()))

        assert params["host"] == "db.internal"
        assert params["port"] == "6543"
        assert params["dbname"] == "budget"
        assert params["user"] == "worker"
        assert params["connect_timeout"] == "10"

    def test_password_with_spaces_and_quotes_survives(self) -> None:
        params = conninfo_to_dict(build_conninfo(_settings()))

        assert params["password"] == "pa ss'word"


class TestPool:
    @patch("budget_worker.database.connection._pool", None)
    def test_get_connection_requires_init(self) -> None:
        with pytest.raises(RuntimeError, match="not initialized"):
            with get_connection():
                pass

    @patch("budget_worker.database.connection._pool", None)
    @patch("budget_worker.database.connection.ConnectionPool")
    def test_init_pool_uses_configured_sizes(self, mock_pool_cls) -> None:
        init_pool(_settings(db_pool_min_size=2, db_pool_max_size=4))

        kwargs = mock_pool_cls.call_args.kwargs
        assert kwargs["min_size"] == 2
        assert kwargs["max_size"] == 4
        mock_pool_cls.return_value.wait.assert_called_once_with(timeout=10)
