"""
Run the bookstore query walkthrough against the configured database.
Import the seed collection first with scripts/import_books.py.
"""

import sys
import logging
from pathlib import Path

# Add the parent directory to the Python path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from bookstore import create_app
from bookstore.core.config import configure_logging
from bookstore.walkthrough import run_walkthrough

configure_logging()
logger = logging.getLogger(__name__)


def main():
    """Main entry point"""
    try:
        app = create_app()
        with app.app_context():
            run_walkthrough()
    except Exception as e:
        logger.error(f"Walkthrough failed: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
