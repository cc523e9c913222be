"""sqlbrick schema layer: column types and the created-table registry."""
from sqlbrick.schema.registry import SchemaRegistry
from sqlbrick.schema.types import ColumnType, ValueKind

__all__ = ["ColumnType", "SchemaRegistry", "ValueKind"]
