"""
Exception types raised by the bookstore services.
"""


class BookstoreError(Exception):
    """Base exception class for bookstore errors"""
    pass


class UnknownFieldError(BookstoreError, ValueError):
    """Raised when a projection, sort or distinct names a field the Book model lacks"""

    def __init__(self, field: str):
        super().__init__(f"Unknown book field: {field!r}")
        self.field = field


class ImportFormatError(BookstoreError):
    """Raised when a seed file is not a JSON array of book objects"""
    pass


class UnsupportedDialectError(BookstoreError):
    """Raised when query-plan inspection is requested on an unsupported engine"""

    def __init__(self, dialect: str):
        super().__init__(f"Query plan inspection is not supported for dialect '{dialect}'")
        self.dialect = dialect
