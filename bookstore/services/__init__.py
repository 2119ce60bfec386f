"""
Services package containing the query, aggregation, index and import operations
run against the books collection.
"""

from .book_queries import (
    count_books, find_books, find_one, paginate_books, update_price,
    delete_by_title, distinct_values, list_collections,
)
from .aggregations import (
    genre_price_stats, author_rankings, books_by_decade, most_expensive_by_genre,
    collection_stats, publication_year_range,
)
from .indexes import create_index, list_indexes, explain
from .importer import import_books

__all__ = [
    'count_books', 'find_books', 'find_one', 'paginate_books', 'update_price',
    'delete_by_title', 'distinct_values', 'list_collections',
    'genre_price_stats', 'author_rankings', 'books_by_decade', 'most_expensive_by_genre',
    'collection_stats', 'publication_year_range',
    'create_index', 'list_indexes', 'explain',
    'import_books',
]
