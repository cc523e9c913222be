"""sqlbrick query layer: immutable predicate chains bound to a table."""
from sqlbrick.query.builder import Query, RowCallback, WhereCursor

__all__ = ["Query", "RowCallback", "WhereCursor"]
