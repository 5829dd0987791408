#!/usr/bin python3

"""
Process configuration, read from environment variables.

Created:       19 Oct 2026
License:       MIT
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from os import getenv

# 3rd party:

# Internal: 

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Header
__license__ = "MIT"
__version__ = "0.1.0"
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'DB_URL',
    'JHU_CSSE_BASE_URL',
    'CONFIRMED_FILE',
    'DEATHS_FILE',
    'RECOVERIES_FILE',
    'COLLECTOR_INTERVAL',
    'REQUEST_TIMEOUT',
    'CSV_CHUNK_SIZE',
    'LOG_LEVEL'
]


DB_URL = getenv("DB_URL")

JHU_CSSE_BASE_URL = getenv(
    "JHU_CSSE_BASE_URL",
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_time_series/"
)

CONFIRMED_FILE = "time_series_covid19_confirmed_global.csv"
DEATHS_FILE = "time_series_covid19_deaths_global.csv"
RECOVERIES_FILE = "time_series_covid19_recovered_global.csv"

# Seconds between two collector ticks (12 hours).
COLLECTOR_INTERVAL = int(getenv("COLLECTOR_INTERVAL", 12 * 60 * 60))

REQUEST_TIMEOUT = float(getenv("REQUEST_TIMEOUT", 60))

CSV_CHUNK_SIZE = int(getenv("CSV_CHUNK_SIZE", 500))

LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
