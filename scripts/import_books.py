"""
Bulk import script.
This script (re)creates the books table and loads the seed collection from JSON.
"""

import sys
import logging
import argparse
from pathlib import Path

# Add the parent directory to the Python path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from bookstore import create_app
from bookstore.core.config import DATA_FILES, configure_logging
from bookstore.services.importer import import_books

configure_logging()
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Import books into the bookstore database")
    parser.add_argument('path', nargs='?', default=DATA_FILES['BOOKS_JSON'],
                        help="JSON array of book documents")
    parser.add_argument('--append', action='store_true',
                        help="keep existing books instead of recreating the table")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    try:
        app = create_app()
        with app.app_context():
            count = import_books(args.path, drop_existing=not args.append)
        print(f"Imported {count} books from {args.path}")
    except Exception as e:
        logger.error(f"Import failed: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
