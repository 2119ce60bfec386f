"""
Book model definition using SQLAlchemy ORM.
"""

from bookstore import db
from bookstore.core.config import DATABASE


class Book(db.Model):
    """Book model representing one document in the books collection."""

    __tablename__ = DATABASE['default']['TABLE']

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(500), nullable=False)
    author = db.Column(db.String(255))
    genre = db.Column(db.String(100))
    published_year = db.Column(db.Integer)
    price = db.Column(db.Float)
    pages = db.Column(db.Integer)
    in_stock = db.Column(db.Boolean)

    # Field names that may be projected, sorted on or imported
    FIELDS = ('title', 'author', 'genre', 'published_year', 'price', 'pages', 'in_stock')

    def __repr__(self):
        """String representation of the book."""
        return f"<Book(id={self.id}, title='{self.title}')>"

    def to_dict(self):
        """Convert book to dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'author': self.author,
            'genre': self.genre,
            'published_year': self.published_year,
            'price': self.price,
            'pages': self.pages,
            'in_stock': self.in_stock
        }
