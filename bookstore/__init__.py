"""
Flask application package for the PLP bookstore.
"""

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from bookstore.core.config import DATABASE

db = SQLAlchemy()


def create_app(test_config=None):
    app = Flask(__name__)

    # Configure the Flask application
    app.config['SQLALCHEMY_DATABASE_URI'] = DATABASE['default']['URL']
    app.config['SQLALCHEMY_ECHO'] = DATABASE['default']['ECHO']
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    if test_config:
        app.config.update(test_config)

    # Initialize extensions
    db.init_app(app)

    # Register blueprints
    from bookstore.api.routes.book_routes import books_bp

    app.register_blueprint(books_bp)

    return app
