from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..core.exceptions import StorageError

# Errors numbered 2000-2999 come from the client library (lost or refused
# connections), not from the server. The C extension raises some of them as
# a plain DatabaseError.
CLIENT_ERRNO_MIN = 2000
CLIENT_ERRNO_MAX = 2999


def is_unavailable(error: BaseException) -> bool:
    if isinstance(error, (mysql_errors.InterfaceError, mysql_errors.OperationalError)):
        return True
    if isinstance(error, mysql_errors.DatabaseError):
        errno = getattr(error, "errno", None)
        return isinstance(errno, int) and CLIENT_ERRNO_MIN <= errno <= CLIENT_ERRNO_MAX
    return False


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "tutoring_attendance")),
        )


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation, so every attendance
    write is its own transaction.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        try:
            return mysql.connector.connect(
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
            )
        except mysql_errors.Error as e:
            if is_unavailable(e):
                raise StorageError(f"Database unreachable: {e}") from e
            raise
