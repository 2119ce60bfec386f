"""
Core configuration settings for the bookstore application.
"""

import os
import logging
import logging.config
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Database settings
DATABASE = {
    'default': {
        'URL': os.getenv(
            'BOOKSTORE_DATABASE_URL',
            f'sqlite:///{os.path.join(BASE_DIR, "data", "plp_bookstore.db")}'
        ),
        'ECHO': os.getenv('SQL_ECHO', 'False').lower() == 'true',
        'TABLE': 'books'
    }
}

# Data files
DATA_FILES = {
    'BOOKS_JSON': os.getenv('BOOKSTORE_BOOKS_JSON', os.path.join(BASE_DIR, 'data', 'books.json'))
}

PAGINATION = {
    'PER_PAGE': int(os.getenv('BOOKSTORE_PER_PAGE', '5'))
}

LOG_DIR = os.path.join(BASE_DIR, 'logs')

# Logging configuration
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s [%(levelname)s][%(name)s:%(lineno)d] %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'detailed': {
            'format': '%(asctime)s [%(levelname)s][%(name)s:%(funcName)s:%(lineno)d] %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    },
    'handlers': {
        'console': {
            'level': os.getenv('BOOKSTORE_LOG_LEVEL', 'WARNING'),
            'formatter': 'standard',
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stderr'
        },
        'file': {
            'level': 'DEBUG',
            'formatter': 'detailed',
            'class': 'logging.FileHandler',
            'filename': os.path.join(LOG_DIR, 'bookstore.log'),
            'mode': 'a',
            'delay': True
        }
    },
    'loggers': {
        '': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': True
        },
        'bookstore': {
            'handlers': ['console', 'file'],
            'level': 'DEBUG',
            'propagate': False
        },
        'sqlalchemy': {'level': 'WARNING'},
        'werkzeug': {'level': 'WARNING'}
    }
}


def configure_logging(config: dict = LOGGING):
    """Apply the logging dictConfig, creating the log directory first."""
    for handler in config.get('handlers', {}).values():
        filename = handler.get('filename')
        if filename:
            os.makedirs(os.path.dirname(filename), exist_ok=True)
    logging.config.dictConfig(config)
    logger.debug("Logging configured")
