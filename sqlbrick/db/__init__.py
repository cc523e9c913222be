"""sqlbrick database layer: engine wiring and raw statement execution."""
from sqlbrick.db.config import (
    PoolSettings,
    ServerDSN,
    build_url,
    describe_source,
    file_descriptor,
)
from sqlbrick.db.database import Database

__all__ = [
    "Database",
    "PoolSettings",
    "ServerDSN",
    "build_url",
    "describe_source",
    "file_descriptor",
]
