"""Data-source descriptors and connection-pool settings.

Two descriptor shapes are accepted by
:meth:`~sqlbrick.db.database.Database.open`:

* **A filesystem path** (SQLite).  ``""`` opens a shared-cache in-memory
  database; anything else is reduced to the allowed path characters and
  opened as a shared-cache file URI.
* **A** :class:`ServerDSN` (or a dict with the same fields) for networked
  servers.

Pool sizing follows the store: SQLite gets exactly one connection because
it has a single writer; servers get a bounded pool described by
:class:`PoolSettings`.
"""
from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy.engine import URL
from sqlalchemy.pool import QueuePool

from sqlbrick.compile.base import SQLDialect
from sqlbrick.errors import InvalidDataSourceError
from sqlbrick.sanitize import to_safe_path

MEMORY_DATABASE = "file::memory:"


class ServerDSN(BaseModel):
    """Connection details for a database server.

    Attributes:
        username: Login name.
        password: Login password.
        host: Host name, or the socket path when ``protocol='unix'``.
        port: TCP port.
        protocol: ``'tcp'`` (default) or ``'unix'``.
        database: Database to select after connecting; ``''`` for none.
    """

    model_config = ConfigDict(extra="forbid")

    username: str = ""
    password: str = ""
    host: str = "localhost"
    port: int = Field(default=3306, ge=0, le=65535)
    protocol: str = "tcp"
    database: str = ""

    def descriptor(self, hide_password: bool = False) -> str:
        """Render ``user:pass@protocol(host:port)[/database]``.

        Args:
            hide_password: Replace a non-empty password with ``***``.
        """
        password = "***" if hide_password and self.password else self.password
        text = f"{self.username}:{password}@{self.protocol or 'tcp'}({self.host}:{self.port})"
        if self.database:
            text += f"/{self.database}"
        return text

    def to_url(self, drivername: str) -> URL:
        """Return the SQLAlchemy URL for ``drivername``."""
        if self.protocol == "unix":
            return URL.create(
                drivername,
                username=self.username or None,
                password=self.password or None,
                database=self.database or None,
                query={"unix_socket": self.host},
            )
        return URL.create(
            drivername,
            username=self.username or None,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database or None,
        )


class PoolSettings(BaseModel):
    """Bounded pool for networked servers.

    Attributes:
        max_open: Maximum simultaneously open connections.
        max_idle: Connections kept open while idle (capped at ``max_open``).
        max_lifetime: Seconds before a connection is recycled.
    """

    model_config = ConfigDict(extra="forbid")

    max_open: int = Field(default=10, ge=1)
    max_idle: int = Field(default=10, ge=1)
    max_lifetime: float = Field(default=180.0, gt=0)


def file_descriptor(path: str) -> str:
    """Return the shared-cache SQLite URI for ``path`` (``''`` = in-memory)."""
    if not path:
        return f"{MEMORY_DATABASE}?cache=shared"
    return f"file:{to_safe_path(path)}?cache=shared"


def describe_source(dsn: str | ServerDSN | dict[str, Any]) -> str:
    """Render a descriptor for logs, with any password masked.

    Paths render as :func:`file_descriptor`, servers as
    :meth:`ServerDSN.descriptor`.
    """
    if isinstance(dsn, str):
        return file_descriptor(dsn)
    if isinstance(dsn, dict):
        dsn = ServerDSN.model_validate(dsn)
    return dsn.descriptor(hide_password=True)


def build_url(dialect: SQLDialect, dsn: str | ServerDSN | dict[str, Any]) -> URL:
    """Turn a data-source descriptor into a SQLAlchemy URL.

    Raises:
        InvalidDataSourceError: If the descriptor shape does not suit the
            dialect, or a server dict fails validation.
    """
    if isinstance(dsn, str):
        if not dialect.file_backed:
            raise InvalidDataSourceError(
                f"Driver '{dialect.dialect_name}' needs a ServerDSN, not a path.",
                driver=dialect.dialect_name,
            )
        database, _, options = file_descriptor(dsn).partition("?")
        query = dict(parse_qsl(options))
        query["uri"] = "true"
        return URL.create(dialect.drivername, database=database, query=query)

    if isinstance(dsn, dict):
        try:
            dsn = ServerDSN.model_validate(dsn)
        except ValidationError as exc:
            raise InvalidDataSourceError(
                f"Invalid server descriptor: {exc}", driver=dialect.dialect_name
            ) from exc

    if isinstance(dsn, ServerDSN):
        if dialect.file_backed:
            raise InvalidDataSourceError(
                f"Driver '{dialect.dialect_name}' needs a filesystem path, not a ServerDSN.",
                driver=dialect.dialect_name,
            )
        return dsn.to_url(dialect.drivername)

    raise InvalidDataSourceError(
        f"Unsupported data-source descriptor: {type(dsn).__name__}",
        driver=dialect.dialect_name,
    )


def engine_options(dialect: SQLDialect, pool: PoolSettings) -> dict[str, Any]:
    """Keyword arguments for ``create_engine`` matching the store type."""
    if dialect.file_backed:
        return {
            "poolclass": QueuePool,
            "pool_size": 1,
            "max_overflow": 0,
            "connect_args": {"check_same_thread": False},
        }
    idle = min(pool.max_idle, pool.max_open)
    return {
        "pool_size": idle,
        "max_overflow": pool.max_open - idle,
        "pool_recycle": pool.max_lifetime,
        "pool_pre_ping": True,
    }
