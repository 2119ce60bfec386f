"""
Pytest configuration and fixtures.
"""

import pytest
from bookstore import create_app, db
from bookstore.core.config import DATA_FILES
from bookstore.models import Book
from bookstore.services.importer import import_books

SAMPLE_BOOKS = [
    {'title': 'Alpha', 'author': 'Ann', 'genre': 'Fiction', 'published_year': 1999,
     'price': 10.0, 'pages': 100, 'in_stock': True},
    {'title': 'Beta', 'author': 'Ann', 'genre': 'Fiction', 'published_year': 2005,
     'price': 20.0, 'pages': 300, 'in_stock': False},
    {'title': 'Gamma', 'author': 'Bob', 'genre': 'Sci-Fi', 'published_year': 2011,
     'price': 30.0, 'pages': 500, 'in_stock': True},
    {'title': 'Delta', 'author': 'Cid', 'genre': 'Sci-Fi', 'published_year': 2015,
     'price': 15.0, 'pages': 200, 'in_stock': None},
    {'title': 'Epsilon', 'author': 'Ann', 'genre': 'History', 'published_year': 1987,
     'price': 12.5, 'pages': 250, 'in_stock': True},
]


@pytest.fixture
def app(tmp_path):
    """Create a test Flask application bound to a temporary SQLite file."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'bookstore.db'}",
        'SQLALCHEMY_ECHO': False,
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def seeded(app):
    """The five sample books, inserted in order."""
    db.session.add_all([Book(**book) for book in SAMPLE_BOOKS])
    db.session.commit()
    return app


@pytest.fixture
def library(app):
    """The full seed collection from data/books.json."""
    import_books(DATA_FILES['BOOKS_JSON'])
    return app


@pytest.fixture
def client(seeded):
    """Create a test client over the sample books."""
    return seeded.test_client()
