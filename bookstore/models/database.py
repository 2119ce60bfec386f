"""
Database schema and session management
"""

from bookstore import db


def init_db():
    """Initialize the database, creating all tables"""
    db.create_all()


def reset_db():
    """Drop and recreate all tables"""
    db.drop_all()
    db.create_all()
