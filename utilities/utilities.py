#!/usr/bin python3

"""
Logging helpers shared by the collector processes.

Created:       19 Oct 2026
License:       MIT
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from functools import wraps
from sys import stdout
import logging

# 3rd party:

# Internal: 
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Header
__license__ = "MIT"
__version__ = "0.1.0"
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'func_logger',
    'configure_logging'
]


LOG_FORMAT = '[%(asctime)s] %(levelname)s | %(message)s'


def func_logger(process_name):
    def logger(func):
        @wraps(func)
        def process_func(*args, **kwargs):
            logging.info(f"> Starting: {process_name}")

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logging.error(f">> Exception occurred in {process_name}")
                logging.exception(e)
                raise e

            logging.info(f"  Complete: {process_name}")

            return result

        return process_func

    return logger


def configure_logging(level="INFO"):
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler(stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    return root
