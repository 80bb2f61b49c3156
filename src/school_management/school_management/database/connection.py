from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "DBConfig":
        return cls(
            host=str(data.get("host", "localhost")),
            port=int(data.get("port", 3306)),
            user=str(data.get("user", "root")),
            password=str(data.get("password", "")),
            database=str(data.get("database", "school_db")),
        )

    def describe(self) -> str:
        """user@host:port/db, for logs. Never includes the password."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Connection factory shared by the MySQL repositories.

    Each repository call opens its own short-lived connection; one factory is
    kept per distinct DBConfig.
    """

    _factories: dict[DBConfig, "DatabaseConnection"] = {}

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def from_dict(cls, db_config: Mapping[str, object]) -> "DatabaseConnection":
        config = DBConfig.from_mapping(db_config)
        if config not in cls._factories:
            cls._factories[config] = cls(config)
        return cls._factories[config]

    def connect(self, *, with_database: bool = True):
        kwargs = dict(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            # UPDATE rowcount counts matched rows, so "no change" still reads as success.
            client_flags=[ClientFlag.FOUND_ROWS],
        )
        if with_database:
            kwargs["database"] = self.config.database
        return mysql.connector.connect(**kwargs)
