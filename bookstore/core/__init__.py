"""
Core package initialization.
"""

from .config import DATABASE, DATA_FILES, PAGINATION, LOGGING, configure_logging

__all__ = ['DATABASE', 'DATA_FILES', 'PAGINATION', 'LOGGING', 'configure_logging']
