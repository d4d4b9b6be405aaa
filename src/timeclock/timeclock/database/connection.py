from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector.constants import ClientFlag

DEFAULT_DB_PORT = 3306
DEFAULT_CONNECT_TIMEOUT = 10


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT

    @classmethod
    def from_settings(cls, db_config: dict) -> "DBConfig":
        """Build from a settings module's ``DB_CONFIG`` dict."""
        return cls(
            host=str(db_config["host"]),
            port=int(db_config.get("port", DEFAULT_DB_PORT)),
            user=str(db_config["user"]),
            password=str(db_config.get("password") or ""),
            database=str(db_config["database"]),
            connect_timeout=int(db_config.get("connect_timeout", DEFAULT_CONNECT_TIMEOUT)),
        )


class DatabaseConnection:
    """Process-wide factory of short-lived MySQL connections.

    Every session runs in UTC, matching the naive UTC DATETIME columns.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=self._config.connect_timeout,
            time_zone="+00:00",
            # rowcount reports matched rows, so a no-op rewrite still counts as found
            client_flags=[ClientFlag.FOUND_ROWS],
        )
