"""
Read, update and delete operations against the books collection.

Filters are plain SQLAlchemy expressions (``Book.genre == 'Fiction'``,
``Book.published_year > 2010``) and are combined with AND. Projection,
ordering and pagination are all pushed to the database engine.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import SQLAlchemyError

from bookstore import db
from bookstore.core.config import PAGINATION
from bookstore.core.exceptions import UnknownFieldError
from bookstore.models.book import Book

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    """Outcome of an update-one statement"""
    matched_count: int
    modified_count: int


@dataclass
class DeleteResult:
    """Outcome of a delete-one statement"""
    deleted_count: int


def book_column(field: str):
    """Return the table column for a Book field name."""
    if field not in Book.FIELDS:
        raise UnknownFieldError(field)
    return Book.__table__.c[field]


def sort_key(spec: str):
    """Turn 'price' / '-price' into an ascending / descending ordering."""
    spec = spec.strip()
    if spec.startswith('-'):
        return book_column(spec[1:]).desc()
    return book_column(spec.lstrip('+')).asc()


def projection_column(field: str):
    """Like book_column, but the id may also be named."""
    if field == 'id':
        return Book.__table__.c.id
    return book_column(field)


def _projection(fields, exclude) -> Optional[list]:
    if fields and exclude:
        raise ValueError("A projection either includes or excludes fields, not both")
    if fields:
        return [projection_column(f) for f in fields]
    if exclude:
        excluded = {projection_column(f).name for f in exclude}
        columns = [column for column in Book.__table__.c if column.name not in excluded]
        if not columns:
            raise ValueError("A projection cannot exclude every field")
        return columns
    return None


def _orderings(order_by) -> list:
    if order_by is None:
        return []
    if isinstance(order_by, (list, tuple)):
        return list(order_by)
    return [order_by]


def count_books(*criteria) -> int:
    """Count books matching every criterion (all books when none given)."""
    stmt = select(func.count()).select_from(Book).where(*criteria)
    return db.session.execute(stmt).scalar_one()


def find_books(*criteria, fields: Optional[Sequence[str]] = None, order_by=None,
               skip: int = 0, limit: Optional[int] = None,
               exclude: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    """
    Find books matching every criterion.

    ``fields`` includes only the named fields; the id is left out unless it
    is named too. ``exclude`` returns every field except the named ones, so
    the id stays unless it is excluded. The two cannot be combined. Without
    ``order_by`` rows come back in insertion order.
    """
    columns = _projection(fields, exclude)
    if columns is not None:
        stmt = select(*columns)
    else:
        stmt = select(Book)

    stmt = stmt.where(*criteria)
    # A sort key always wins; the id only breaks ties so pages stay stable
    stmt = stmt.order_by(*_orderings(order_by), Book.id)
    if skip:
        stmt = stmt.offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)

    logger.debug(f"find_books: {stmt}")
    if columns is not None:
        return [dict(row._mapping) for row in db.session.execute(stmt)]
    return [book.to_dict() for book in db.session.execute(stmt).scalars()]


def find_one(*criteria) -> Optional[Dict[str, Any]]:
    """Return the first matching book in insertion order, or None."""
    books = find_books(*criteria, limit=1)
    return books[0] if books else None


def paginate_books(page: int, per_page: Optional[int] = None,
                   fields: Optional[Sequence[str]] = None, order_by=None,
                   criteria: Sequence = (),
                   exclude: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    """Return one page of books; pages are numbered from 1."""
    if per_page is None:
        per_page = PAGINATION['PER_PAGE']
    if page < 1:
        raise ValueError(f"page must be 1 or greater, got {page}")
    if per_page < 1:
        raise ValueError(f"per_page must be 1 or greater, got {per_page}")
    return find_books(*criteria, fields=fields, exclude=exclude, order_by=order_by,
                      skip=(page - 1) * per_page, limit=per_page)


def _first_by_title(title: str) -> Optional[Book]:
    stmt = select(Book).where(Book.title == title).order_by(Book.id).limit(1)
    return db.session.execute(stmt).scalar_one_or_none()


def update_price(title: str, price: float) -> UpdateResult:
    """Set the price of the first book with the given title."""
    book = _first_by_title(title)
    if book is None:
        logger.info(f"update_price: no book titled '{title}'")
        return UpdateResult(matched_count=0, modified_count=0)
    if book.price == price:
        return UpdateResult(matched_count=1, modified_count=0)

    try:
        book.price = price
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to update price of '{title}': {e}")
        raise

    logger.info(f"Updated price of '{title}' to {price}")
    return UpdateResult(matched_count=1, modified_count=1)


def delete_by_title(title: str) -> DeleteResult:
    """Delete the first book with the given title."""
    book = _first_by_title(title)
    if book is None:
        logger.info(f"delete_by_title: no book titled '{title}'")
        return DeleteResult(deleted_count=0)

    try:
        db.session.delete(book)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to delete '{title}': {e}")
        raise

    logger.info(f"Deleted '{title}'")
    return DeleteResult(deleted_count=1)


def distinct_values(field: str) -> list:
    """Sorted distinct non-null values of a field."""
    column = book_column(field)
    stmt = select(column).where(column.is_not(None)).distinct().order_by(column)
    return list(db.session.execute(stmt).scalars())


def list_collections() -> List[str]:
    """Table names present in the database."""
    return sorted(inspect(db.engine).get_table_names())
