"""
PLP bookstore query walkthrough.

Runs each statement once, in order, under printed section headers. Nothing
here branches on a result or retries; a failing statement propagates to the
caller.
"""

import logging
from dataclasses import asdict, is_dataclass

import pandas as pd

from bookstore.core.config import PAGINATION
from bookstore.models.book import Book
from bookstore.services import aggregations, book_queries, indexes

logger = logging.getLogger(__name__)

BOOK_FIELDS = ['title', 'author', 'price']
PER_PAGE = PAGINATION['PER_PAGE']


def show(result):
    """Print a query result as a table."""
    if is_dataclass(result):
        result = asdict(result)
    if isinstance(result, list):
        if not result:
            print("(no documents)")
        elif isinstance(result[0], dict):
            print(pd.DataFrame(result).to_string(index=False))
        else:
            for value in result:
                print(value)
    elif isinstance(result, dict):
        print(pd.DataFrame([result]).to_string(index=False))
    elif result is None:
        print("(no documents)")
    else:
        print(result)


def show_plan(plan: indexes.QueryPlan):
    print(f"stage: {'IXSCAN' if plan.uses_index else 'COLLSCAN'} ({plan.strategy})")
    print(f"index: {plan.index_name or '-'}")
    print(f"documents returned: {plan.rows_returned}")
    print(f"execution time: {plan.execution_time_ms} ms")
    for detail in plan.details:
        print(f"  plan: {detail}")


def database_setup():
    print("=== DATABASE SETUP ===")
    print("\nInitial document count:")
    show(book_queries.count_books())


def basic_crud():
    print("\n=== TASK 2: BASIC CRUD OPERATIONS ===")

    print("\n1. Find all books in Fiction genre:")
    show(book_queries.find_books(Book.genre == 'Fiction'))

    print("\n2. Find books published after 2010:")
    show(book_queries.find_books(Book.published_year > 2010))
    print("\nBooks published after 2015:")
    show(book_queries.find_books(Book.published_year > 2015))

    print("\n3. Find books by George Orwell:")
    show(book_queries.find_books(Book.author == 'George Orwell'))
    print("\nBooks by J.K. Rowling:")
    show(book_queries.find_books(Book.author == 'J.K. Rowling'))

    print("\n4. Update price of '1984' to $15.99:")
    show(book_queries.update_price('1984', 15.99))
    show(book_queries.find_books(Book.title == '1984', fields=['title', 'price']))

    print("\n5. Delete 'The Da Vinci Code':")
    show(book_queries.delete_by_title('The Da Vinci Code'))
    print("\nDocument count after deletion:")
    show(book_queries.count_books())
    show(book_queries.find_books(Book.title == 'The Da Vinci Code'))


def advanced_queries():
    print("\n=== TASK 3: ADVANCED QUERIES ===")

    print("\n1. Books in stock AND published after 2010:")
    in_stock_recent = (Book.in_stock.is_(True), Book.published_year > 2010)
    show(book_queries.find_books(*in_stock_recent))
    print("\nMatching count:")
    show(book_queries.count_books(*in_stock_recent))

    print("\n2. All books with projection (title, author, price only):")
    show(book_queries.find_books(fields=BOOK_FIELDS))
    print("\nFiction books with projection:")
    show(book_queries.find_books(Book.genre == 'Fiction', fields=BOOK_FIELDS))

    print("\n3a. Books sorted by price (ASCENDING - lowest to highest):")
    show(book_queries.find_books(fields=['title', 'price'], order_by=Book.price.asc()))

    print("\n3b. Books sorted by price (DESCENDING - highest to lowest):")
    show(book_queries.find_books(fields=['title', 'price'], order_by=Book.price.desc()))

    print("\nBooks sorted by publication year (newest first):")
    show(book_queries.find_books(fields=['title', 'published_year'],
                                 order_by=Book.published_year.desc()))

    print(f"\n4. PAGINATION ({PER_PAGE} books per page):")
    for page in range(1, 5):
        first = (page - 1) * PER_PAGE + 1
        print(f"\nPAGE {page}: Books {first}-{first + PER_PAGE - 1}")
        show(book_queries.paginate_books(page, PER_PAGE, fields=BOOK_FIELDS))

    print(f"\nPagination with sorting - Cheapest {PER_PAGE} books:")
    show(book_queries.find_books(fields=['title', 'price'], order_by=Book.price.asc(), limit=PER_PAGE))


def aggregation_pipeline():
    print("\n=== TASK 4: AGGREGATION PIPELINE ===")

    print("\n1. Average price by genre:")
    show(aggregations.genre_price_stats())

    print("\n2. Author with most books:")
    show(aggregations.author_rankings(limit=1))

    print("\nAll authors with book counts:")
    show([{k: v for k, v in row.items() if k != 'total_value'}
          for row in aggregations.author_rankings()])

    print("\n3. Books grouped by decade:")
    show(aggregations.books_by_decade())

    print("\nBONUS: Most expensive book in each genre:")
    show(aggregations.most_expensive_by_genre())

    print("\nBONUS: Overall collection statistics:")
    show(aggregations.collection_stats())


def indexing():
    print("\n=== TASK 5: INDEXING ===")

    print("\n1. Creating index on 'title' field:")
    show(indexes.create_index('title'))

    print("\n2. Creating compound index on 'author' and 'published_year':")
    show(indexes.create_index('author', ('published_year', -1)))

    print("\n3. Creating index on 'price' field:")
    show(indexes.create_index('price'))

    print("\n4. All indexes on books collection:")
    show(indexes.list_indexes())

    print("\n5. Performance Analysis with explain():")

    print("\nTest 1: Finding book by title (uses title index):")
    show_plan(indexes.explain(Book.title == '1984'))

    print("\nTest 2: Finding books by author and year (uses compound index):")
    show_plan(indexes.explain(Book.author == 'George Orwell', Book.published_year >= 1940))

    print("\nTest 3: Price range query (uses price index):")
    show_plan(indexes.explain(Book.price >= 10, Book.price <= 15))

    print("\nTest 4: Query on non-indexed field (collection scan):")
    show_plan(indexes.explain(Book.pages > 300))

    print("\n=== Performance Summary ===")
    print("Indexed queries use IXSCAN (Index Scan)")
    print("Non-indexed queries use COLLSCAN (Collection Scan)")
    print("Indexed queries examine fewer documents")
    print("Compound indexes work for queries on first field or both fields")


def final_verification():
    print("\n=== FINAL VERIFICATION ===")

    print("\nTotal documents in collection:")
    show(book_queries.count_books())

    print("\nCollections in database:")
    show(book_queries.list_collections())

    print("\nSample document:")
    show(book_queries.find_one())

    print("\nUnique genres:")
    show(book_queries.distinct_values('genre'))

    print("\nPublication year range:")
    show(aggregations.publication_year_range())


def run_walkthrough():
    """Run every section in order."""
    logger.info("Starting bookstore query walkthrough")
    database_setup()
    basic_crud()
    advanced_queries()
    aggregation_pipeline()
    indexing()
    final_verification()
    print("\n=== ALL TASKS COMPLETED SUCCESSFULLY ===")
    logger.info("Bookstore query walkthrough finished")
