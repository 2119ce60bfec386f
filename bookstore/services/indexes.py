"""
Index management and query-plan inspection for the books collection.
"""

import json
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import Index, MetaData, Table, inspect, select

from bookstore import db
from bookstore.core.exceptions import UnsupportedDialectError
from bookstore.models.book import Book
from bookstore.services.book_queries import book_column

logger = logging.getLogger(__name__)

IndexKey = Union[str, Tuple[str, int]]

INDEX_SCAN = 'index scan'
FULL_SCAN = 'full scan'

_SQLITE_INDEX = re.compile(r'USING (?:COVERING )?INDEX (\w+)')
_SQLITE_PRIMARY_KEY = re.compile(r'USING (?:INTEGER )?PRIMARY KEY')
_POSTGRES_INDEX_NODES = ('Index Scan', 'Index Only Scan', 'Bitmap Index Scan')


@dataclass
class QueryPlan:
    """Winning plan plus execution stats for one query"""
    strategy: str
    index_name: Optional[str]
    details: List[str] = field(default_factory=list)
    rows_returned: int = 0
    execution_time_ms: float = 0.0

    @property
    def uses_index(self) -> bool:
        return self.strategy == INDEX_SCAN


def _normalize_keys(keys) -> List[Tuple[str, int]]:
    if not keys:
        raise ValueError("create_index needs at least one key")
    normalized = []
    for key in keys:
        name, direction = (key, 1) if isinstance(key, str) else key
        if direction not in (1, -1):
            raise ValueError(f"Index direction must be 1 or -1, got {direction!r}")
        book_column(name)
        normalized.append((name, direction))
    return normalized


def index_name(*keys: IndexKey) -> str:
    """Name an index after its keys, e.g. ix_books_author_published_year_desc."""
    parts = [name if direction == 1 else f"{name}_desc" for name, direction in _normalize_keys(keys)]
    return f"ix_{Book.__tablename__}_" + "_".join(parts)


def _existing_index_names() -> List[str]:
    return [ix['name'] for ix in inspect(db.engine).get_indexes(Book.__tablename__)]


def create_index(*keys: IndexKey) -> str:
    """
    Create a single-field or compound index and return its name.

    Keys are field names (ascending) or ``(field, direction)`` pairs where
    direction is 1 for ascending and -1 for descending. Creating an index
    that already exists does nothing.
    """
    normalized = _normalize_keys(keys)
    name = index_name(*normalized)
    if name in _existing_index_names():
        logger.info(f"Index {name} already exists")
        return name

    # Reflected copy so the model's own metadata never picks up the index
    table = Table(Book.__tablename__, MetaData(), autoload_with=db.engine)
    expressions = [
        table.c[column] if direction == 1 else table.c[column].desc()
        for column, direction in normalized
    ]
    with db.engine.begin() as conn:
        Index(name, *expressions).create(conn)
    logger.info(f"Created index {name}")
    return name


def list_indexes() -> List[Dict[str, Any]]:
    """The primary key followed by every secondary index on the books table."""
    inspector = inspect(db.engine)
    primary = inspector.get_pk_constraint(Book.__tablename__)
    indexes = [{
        'name': primary.get('name') or 'primary',
        'columns': [(column, 1) for column in primary['constrained_columns']],
        'unique': True,
    }]
    for ix in inspector.get_indexes(Book.__tablename__):
        indexes.append({
            'name': ix['name'],
            'columns': _index_columns(ix),
            'unique': bool(ix.get('unique')),
        })
    return indexes


def _index_columns(ix: Dict[str, Any]) -> List[Tuple[str, int]]:
    # The SQLite inspector leaves column_sorting empty, so ask the engine directly
    if db.engine.dialect.name == 'sqlite':
        with db.engine.connect() as conn:
            rows = conn.exec_driver_sql(f'PRAGMA index_xinfo("{ix["name"]}")').mappings().all()
        return [(row['name'], -1 if row['desc'] else 1) for row in rows if row['key']]

    sorting = ix.get('column_sorting') or {}
    return [
        (column, -1 if 'desc' in sorting.get(column, ()) else 1)
        for column in ix['column_names']
    ]


def _sqlite_plan(conn, sql: str) -> Tuple[str, Optional[str], List[str]]:
    details = [row[-1] for row in conn.exec_driver_sql(f"EXPLAIN QUERY PLAN {sql}")]
    for detail in details:
        match = _SQLITE_INDEX.search(detail)
        if match:
            return INDEX_SCAN, match.group(1), details
        if _SQLITE_PRIMARY_KEY.search(detail):
            return INDEX_SCAN, 'primary', details
    return FULL_SCAN, None, details


def _postgres_plan(conn, sql: str) -> Tuple[str, Optional[str], List[str]]:
    raw = conn.exec_driver_sql(f"EXPLAIN (FORMAT JSON) {sql}").scalar()
    if isinstance(raw, str):
        raw = json.loads(raw)

    details = []
    found = None
    pending = [raw[0]['Plan']]
    while pending:
        node = pending.pop(0)
        details.append(node['Node Type'])
        if found is None and node['Node Type'] in _POSTGRES_INDEX_NODES:
            found = node.get('Index Name')
        pending.extend(node.get('Plans', []))

    if found is not None:
        return INDEX_SCAN, found, details
    return FULL_SCAN, None, details


def explain(*criteria) -> QueryPlan:
    """Inspect the engine's plan for a filter, then run it once for stats."""
    stmt = select(Book).where(*criteria)
    dialect = db.engine.dialect
    sql = str(stmt.compile(dialect=dialect, compile_kwargs={'literal_binds': True}))

    if dialect.name == 'sqlite':
        planner = _sqlite_plan
    elif dialect.name == 'postgresql':
        planner = _postgres_plan
    else:
        raise UnsupportedDialectError(dialect.name)

    with db.engine.connect() as conn:
        strategy, index, details = planner(conn, sql)

    start = time.perf_counter()
    rows = db.session.execute(stmt).scalars().all()
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.debug(f"explain: {sql} -> {strategy} ({index})")
    return QueryPlan(
        strategy=strategy,
        index_name=index,
        details=details,
        rows_returned=len(rows),
        execution_time_ms=round(elapsed_ms, 3),
    )
