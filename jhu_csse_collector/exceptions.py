#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:

# 3rd party:

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'CollectorError',
    'TransportError',
    'ParseError',
    'FieldError',
    'AlignmentError',
    'StorageError'
]


class CollectorError(RuntimeError):
    """
    Base class for every failure that aborts a collector run.
    """
    pass


class TransportError(CollectorError):
    """
    The source CSV could not be downloaded.
    """
    pass


class ParseError(CollectorError):
    """
    The source CSV is structurally malformed.
    """
    pass


class FieldError(CollectorError, ValueError):
    """
    A field could not be converted to its numeric or date type.
    """

    def __init__(self, message: str, row=None, column=None):
        super().__init__(message)
        self.row = row
        self.column = column


class AlignmentError(CollectorError):
    """
    Two paired CSV streams disagree on their rows or dates.
    """
    pass


class StorageError(CollectorError):
    """
    The transaction could not be opened, executed or committed.
    """
    pass
