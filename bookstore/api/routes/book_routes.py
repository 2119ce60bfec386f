"""
Read-only JSON routes over the books collection
"""

from flask import Blueprint, request, jsonify
import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from bookstore.core.exceptions import BookstoreError
from bookstore.models.book import Book
from bookstore.services import aggregations, book_queries, indexes

logger = logging.getLogger(__name__)

books_bp = Blueprint('books', __name__)

STATS = {
    'genres': aggregations.genre_price_stats,
    'authors': aggregations.author_rankings,
    'decades': aggregations.books_by_decade,
    'most-expensive': aggregations.most_expensive_by_genre,
    'summary': aggregations.collection_stats,
}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def build_criteria(args) -> List:
    """Translate query-string filters into SQLAlchemy criteria"""
    criteria = []
    if args.get('genre'):
        criteria.append(Book.genre == args['genre'])
    if args.get('author'):
        criteria.append(Book.author == args['author'])
    if args.get('published_after'):
        criteria.append(Book.published_year > int(args['published_after']))
    if args.get('in_stock'):
        criteria.append(Book.in_stock.is_(_parse_bool(args['in_stock'])))
    return criteria


def _field_list(value):
    return [f.strip() for f in (value or '').split(',') if f.strip()] or None


@books_bp.route('/api/books', methods=['GET'])
def list_books():
    """Filter, project, sort and paginate books"""
    try:
        criteria = build_criteria(request.args)
        fields = _field_list(request.args.get('fields'))
        exclude = _field_list(request.args.get('exclude'))
        order_by = book_queries.sort_key(request.args['sort']) if request.args.get('sort') else None

        if request.args.get('page'):
            per_page = request.args.get('per_page')
            books = book_queries.paginate_books(
                int(request.args['page']),
                int(per_page) if per_page else None,
                fields=fields,
                exclude=exclude,
                order_by=order_by,
                criteria=criteria,
            )
        else:
            books = book_queries.find_books(*criteria, fields=fields, exclude=exclude, order_by=order_by)

        total = book_queries.count_books(*criteria)
    except (ValueError, BookstoreError) as e:
        logger.warning(f"Rejected book query {dict(request.args)}: {e}")
        return jsonify({'error': str(e)}), 400
    except SQLAlchemyError as e:
        logger.error(f"Book query failed: {e}", exc_info=True)
        return jsonify({'error': 'Database error while querying books.'}), 500

    return jsonify({'books': books, 'total': total})


@books_bp.route('/api/books/stats/<name>', methods=['GET'])
def book_stats(name):
    """Run one of the named aggregations"""
    aggregate = STATS.get(name)
    if aggregate is None:
        return jsonify({'error': f"Unknown statistic '{name}'", 'available': sorted(STATS)}), 404

    try:
        results = aggregate()
    except SQLAlchemyError as e:
        logger.error(f"Aggregation '{name}' failed: {e}", exc_info=True)
        return jsonify({'error': 'Database error while aggregating books.'}), 500

    return jsonify({'results': results})


@books_bp.route('/api/indexes', methods=['GET'])
def book_indexes():
    """List indexes on the books table"""
    return jsonify({'indexes': indexes.list_indexes()})
