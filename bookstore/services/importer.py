"""
Bulk import of book documents from a JSON seed file.
"""

import json
import logging
from pathlib import Path
from typing import Union

from sqlalchemy.exc import SQLAlchemyError

from bookstore import db
from bookstore.core.exceptions import ImportFormatError
from bookstore.models.book import Book
from bookstore.models.database import init_db, reset_db

logger = logging.getLogger(__name__)


def import_books(path: Union[str, Path], drop_existing: bool = True) -> int:
    """Load a JSON array of books into the books table and return the row count inserted."""
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(records, list):
        raise ImportFormatError(f"{path} must contain a JSON array of books")

    if drop_existing:
        reset_db()
    else:
        init_db()

    books = []
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            raise ImportFormatError(f"Entry {position} in {path} is not an object")
        ignored = set(record) - set(Book.FIELDS)
        if ignored:
            logger.debug(f"Ignoring fields {sorted(ignored)} for '{record.get('title', 'Unknown')}'")
        books.append(Book(**{k: v for k, v in record.items() if k in Book.FIELDS}))

    try:
        db.session.add_all(books)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Book import from {path} failed: {e}")
        raise

    logger.info(f"Imported {len(books)} books from {path}")
    return len(books)
