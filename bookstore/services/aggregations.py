"""
Aggregations over the books collection.

Grouping, accumulation and ordering run in the database as GROUP BY and
window queries; Python only rounds values and reshapes the returned rows.
Accumulated title lists come from a second ordered query so they keep the
insertion order of the collection.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from sqlalchemy import Integer, case, func, literal_column, select

from bookstore import db
from bookstore.models.book import Book

logger = logging.getLogger(__name__)


def _round(value, ndigits: int = 2):
    return round(value, ndigits) if value is not None else None


def genre_price_stats() -> List[Dict[str, Any]]:
    """Average, minimum and maximum price per genre, most expensive genre first."""
    average_price = func.avg(Book.price).label('average_price')
    stmt = (
        select(
            Book.genre,
            average_price,
            func.count().label('total_books'),
            func.min(Book.price).label('min_price'),
            func.max(Book.price).label('max_price'),
        )
        .group_by(Book.genre)
        .order_by(average_price.desc(), Book.genre)
    )
    results = []
    for row in db.session.execute(stmt):
        results.append({
            'genre': row.genre,
            'average_price': _round(row.average_price),
            'total_books': row.total_books,
            'min_price': row.min_price,
            'max_price': row.max_price,
        })
    logger.info(f"genre_price_stats: {len(results)} genres")
    return results


def _titles_by(key_column) -> Dict[Any, List[str]]:
    stmt = select(key_column, Book.title).order_by(Book.id)
    titles = defaultdict(list)
    for key, title in db.session.execute(stmt):
        titles[key].append(title)
    return titles


def author_rankings(limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Authors ranked by number of books; ``limit=1`` gives the most prolific author."""
    book_count = func.count().label('book_count')
    stmt = (
        select(Book.author, book_count, func.sum(Book.price).label('total_value'))
        .group_by(Book.author)
        .order_by(book_count.desc(), Book.author)
    )
    if limit is not None:
        stmt = stmt.limit(limit)

    rows = db.session.execute(stmt).all()
    titles = _titles_by(Book.author)
    return [
        {
            'author': row.author,
            'book_count': row.book_count,
            'books': titles.get(row.author, []),
            'total_value': row.total_value,
        }
        for row in rows
    ]


def books_by_decade() -> List[Dict[str, Any]]:
    """Books grouped by publication decade, oldest decade first."""
    ten = literal_column("10", Integer)
    decade = ((Book.published_year // ten) * ten).label('decade')
    stmt = (
        select(decade, func.count().label('book_count'), func.avg(Book.price).label('average_price'))
        .where(Book.published_year.is_not(None))
        .group_by(decade)
        .order_by(decade)
    )
    groups = db.session.execute(stmt).all()

    members = defaultdict(list)
    member_stmt = (
        select(decade, Book.title, Book.published_year, Book.author)
        .where(Book.published_year.is_not(None))
        .order_by(Book.id)
    )
    for row in db.session.execute(member_stmt):
        members[row.decade].append({
            'title': row.title,
            'year': row.published_year,
            'author': row.author,
        })

    return [
        {
            'decade': f"{int(row.decade)}s",
            'count': row.book_count,
            'books': members[row.decade],
            'average_price': row.average_price,
        }
        for row in groups
    ]


def most_expensive_by_genre() -> List[Dict[str, Any]]:
    """The highest-priced book of every genre, most expensive first."""
    rank = func.row_number().over(
        partition_by=Book.genre,
        order_by=(Book.price.desc(), Book.id),
    ).label('rank')
    ranked = select(Book.genre, Book.title, Book.price, Book.author, rank).subquery()
    stmt = (
        select(ranked.c.genre, ranked.c.title, ranked.c.price, ranked.c.author)
        .where(ranked.c.rank == 1)
        .order_by(ranked.c.price.desc(), ranked.c.genre)
    )
    return [
        {
            'genre': row.genre,
            'most_expensive': row.title,
            'highest_price': row.price,
            'author': row.author,
        }
        for row in db.session.execute(stmt)
    ]


def collection_stats() -> Optional[Dict[str, Any]]:
    """Totals and averages across the whole collection; None when it is empty."""
    in_stock = case((Book.in_stock.is_(True), 1), else_=0)
    out_of_stock = case((Book.in_stock.is_(True), 0), else_=1)
    stmt = select(
        func.count().label('total_books'),
        func.avg(Book.price).label('average_price'),
        func.sum(Book.price).label('total_value'),
        func.avg(Book.pages).label('average_pages'),
        func.sum(in_stock).label('in_stock_count'),
        func.sum(out_of_stock).label('out_of_stock_count'),
    )
    row = db.session.execute(stmt).one()
    if not row.total_books:
        return None
    return {
        'total_books': row.total_books,
        'average_price': _round(row.average_price),
        'total_value': _round(row.total_value),
        'average_pages': int(round(row.average_pages)) if row.average_pages is not None else None,
        'in_stock_count': row.in_stock_count,
        'out_of_stock_count': row.out_of_stock_count,
    }


def publication_year_range() -> Optional[Dict[str, int]]:
    """Oldest and newest publication year; None when the collection is empty."""
    stmt = select(
        func.min(Book.published_year).label('oldest_book'),
        func.max(Book.published_year).label('newest_book'),
    )
    row = db.session.execute(stmt).one()
    if row.oldest_book is None:
        return None
    return {'oldest_book': row.oldest_book, 'newest_book': row.newest_book}
