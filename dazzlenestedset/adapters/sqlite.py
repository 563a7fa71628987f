"""SQLite store adapter for DazzleNestedSet.

Stores one record per row. The structural fields (parent reference, left,
right) and the scope columns get real columns with indexes so every
nested set query becomes an indexed range scan; any other field is kept in
a JSON ``data`` column.
"""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Type

from .._common.config import NestedSetConfig
from .._common.criteria import Criterion, Operator
from ..core.adapter import StoreAdapter
from ..core.errors import DuplicateNodeError, NodeNotFoundError
from ..core.node import NestedSetNode, Record

logger = logging.getLogger(__name__)


def _quote(name: str) -> str:
    """Quote an SQL identifier after checking it is a plain name."""
    if not name or not name.replace("_", "a").isalnum():
        raise ValueError(f"Invalid column or table name: {name!r}")
    return f'"{name}"'


class SQLiteStoreAdapter(StoreAdapter):
    """StoreAdapter persisting records in an SQLite table.

    Each public write commits immediately unless it runs inside
    ``transaction()``, which callers can use to make a whole move or
    destroy atomic.

    Example:
        >>> config = NestedSetConfig.scoped("organization_id")
        >>> adapter = SQLiteStoreAdapter(config, "categories.db", table="categories")
        >>> tree = NestedSet(adapter, config)
    """

    def __init__(self,
                 config: NestedSetConfig,
                 database: str = ":memory:",
                 table: str = "nodes",
                 record_class: Type[Record] = Record,
                 connection: Optional[sqlite3.Connection] = None):
        """Open (or reuse) a connection and create the table if needed.

        Args:
            config: Nested set configuration naming the structural columns
            database: Path of the SQLite file, ``:memory:`` by default
            table: Table holding the records
            record_class: Record subclass to build on reads
            connection: Existing connection to use instead of opening one
        """
        self.config = config
        self.table = table
        self.record_class = record_class
        self._connection = connection or sqlite3.connect(database)
        self._connection.row_factory = sqlite3.Row
        self._transaction_depth = 0
        self._columns: Tuple[str, ...] = (
            config.parent_column, config.left_column, config.right_column
        ) + tuple(config.scope)
        self._create_table()

    def _create_table(self) -> None:
        config = self.config
        table = _quote(self.table)
        scope = [_quote(column) for column in config.scope]
        definitions = [
            '"id" PRIMARY KEY',
            f"{_quote(config.parent_column)}",
            f"{_quote(config.left_column)} INTEGER",
            f"{_quote(config.right_column)} INTEGER",
        ] + scope + ['"data" TEXT NOT NULL DEFAULT \'{}\'']

        with self._write():
            self._connection.execute(
                f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(definitions)})"
            )
            for column in (config.left_column, config.right_column):
                index_columns = ", ".join(scope + [_quote(column)])
                self._connection.execute(
                    f"CREATE INDEX IF NOT EXISTS {_quote(f'{self.table}_{column}_idx')} "
                    f"ON {table} ({index_columns})"
                )
            self._connection.execute(
                f"CREATE INDEX IF NOT EXISTS {_quote(f'{self.table}_{config.parent_column}_idx')} "
                f"ON {table} ({_quote(config.parent_column)})"
            )

    # Transactions

    @contextmanager
    def _write(self) -> Iterator[None]:
        """Commit after the block unless an outer transaction is open."""
        if self._transaction_depth:
            yield
            return
        try:
            yield
        except Exception:
            self._connection.rollback()
            raise
        self._connection.commit()

    @contextmanager
    def transaction(self) -> Iterator['SQLiteStoreAdapter']:
        """Group every write in the block into one commit.

        Nested blocks join the outermost transaction. Any exception rolls
        the whole transaction back.
        """
        self._transaction_depth += 1
        try:
            yield self
        except Exception:
            self._transaction_depth -= 1
            if not self._transaction_depth:
                self._connection.rollback()
                logger.debug("Rolled back transaction on %s", self.table)
            raise
        self._transaction_depth -= 1
        if not self._transaction_depth:
            self._connection.commit()

    def supports_transactions(self) -> bool:
        return True

    def close(self) -> None:
        self._connection.close()

    # Row mapping

    def _split_fields(self, node: NestedSetNode) -> Tuple[List[Any], str]:
        """Return the column values and the JSON payload of a record."""
        values = [node.get_field(column) for column in self._columns]
        extra: Dict[str, Any] = {}
        if isinstance(node, Record):
            extra = {name: value for name, value in node.fields.items()
                     if name not in self._columns}
        return values, json.dumps(extra, sort_keys=True)

    def _to_record(self, row: sqlite3.Row) -> Record:
        fields = json.loads(row["data"])
        for column in self._columns:
            fields[column] = row[column]
        return self.record_class.from_store(row["id"], fields)

    def _where(self, criteria: Sequence[Criterion]) -> Tuple[str, List[Any]]:
        clauses = []
        params: List[Any] = []
        for criterion in criteria:
            if criterion.field != "id" and criterion.field not in self._columns:
                raise ValueError(f"{criterion.field!r} is not a queryable column")
            column = _quote(criterion.field)
            if criterion.value is None:
                if criterion.op is not Operator.EQ:
                    # Ordering comparisons never match an unset value
                    clauses.append("0")
                    continue
                clauses.append(f"{column} IS NULL")
            else:
                sql_op = "=" if criterion.op is Operator.EQ else criterion.op.value
                clauses.append(f"{column} {sql_op} ?")
                params.append(criterion.value)
        return (" WHERE " + " AND ".join(clauses)) if clauses else "", params

    def _order(self, order_by: Sequence[str]) -> str:
        terms = []
        for term in order_by:
            descending = term.startswith("-")
            name = term[1:] if descending else term
            terms.append(f"{_quote(name)} {'DESC' if descending else 'ASC'}")
        return (" ORDER BY " + ", ".join(terms)) if terms else ""

    # StoreAdapter interface

    def get(self, node_id: Any) -> Record:
        row = self._connection.execute(
            f"SELECT * FROM {_quote(self.table)} WHERE \"id\" = ?", (node_id,)
        ).fetchone()
        if row is None:
            raise NodeNotFoundError(node_id)
        return self._to_record(row)

    def find(self,
             criteria: Sequence[Criterion] = (),
             order_by: Sequence[str] = (),
             limit: Optional[int] = None) -> List[Record]:
        where, params = self._where(criteria)
        sql = f"SELECT * FROM {_quote(self.table)}{where}{self._order(order_by)}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        return [self._to_record(row) for row in self._connection.execute(sql, params)]

    def count(self, criteria: Sequence[Criterion] = ()) -> int:
        where, params = self._where(criteria)
        row = self._connection.execute(
            f"SELECT COUNT(*) FROM {_quote(self.table)}{where}", params
        ).fetchone()
        return row[0]

    def insert(self, node: NestedSetNode) -> NestedSetNode:
        node_id = node.identifier()
        if node_id is None:
            node_id = uuid.uuid4().hex
        values, data = self._split_fields(node)
        columns = ", ".join(['"id"'] + [_quote(c) for c in self._columns] + ['"data"'])
        placeholders = ", ".join("?" * (len(self._columns) + 2))
        try:
            with self._write():
                self._connection.execute(
                    f"INSERT INTO {_quote(self.table)} ({columns}) VALUES ({placeholders})",
                    [node_id] + values + [data],
                )
        except sqlite3.IntegrityError as e:
            # The primary key is the only constraint on the table
            raise DuplicateNodeError(node_id) from e
        node.mark_persisted(node_id)
        return node

    def save(self, node: NestedSetNode) -> None:
        values, data = self._split_fields(node)
        assignments = ", ".join(f"{_quote(c)} = ?" for c in self._columns + ("data",))
        with self._write():
            cursor = self._connection.execute(
                f"UPDATE {_quote(self.table)} SET {assignments} WHERE \"id\" = ?",
                values + [data, node.identifier()],
            )
        if cursor.rowcount == 0:
            raise NodeNotFoundError(node.identifier())

    def update_field(self, node_id: Any, field: str, value: Any) -> None:
        with self._write():
            if field in self._columns:
                cursor = self._connection.execute(
                    f"UPDATE {_quote(self.table)} SET {_quote(field)} = ? WHERE \"id\" = ?",
                    (value, node_id),
                )
            else:
                cursor = self._connection.execute(
                    f"UPDATE {_quote(self.table)} SET \"data\" = json_set(\"data\", ?, json(?)) "
                    f"WHERE \"id\" = ?",
                    (f"$.{field}", json.dumps(value), node_id),
                )
        if cursor.rowcount == 0:
            raise NodeNotFoundError(node_id)

    def delete(self, node_id: Any) -> None:
        with self._write():
            self._connection.execute(
                f"DELETE FROM {_quote(self.table)} WHERE \"id\" = ?", (node_id,)
            )

    def delete_where(self, criteria: Sequence[Criterion]) -> int:
        where, params = self._where(criteria)
        with self._write():
            cursor = self._connection.execute(
                f"DELETE FROM {_quote(self.table)}{where}", params
            )
        return cursor.rowcount

    def exists(self, node_id: Any) -> bool:
        row = self._connection.execute(
            f"SELECT 1 FROM {_quote(self.table)} WHERE \"id\" = ?", (node_id,)
        ).fetchone()
        return row is not None

    def estimated_size(self) -> Optional[int]:
        return self.count()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(table={self.table!r})"
