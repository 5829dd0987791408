#!/usr/bin python3

"""
JHU CSSE time-series collector
------------------------------

Refreshes the confirmed cases, deaths and recoveries time series from
the wide-format CSV files published by JHU CSSE.

Each run downloads the source files, derives the daily new counts for
every location and upserts every (location, date) observation inside
a single transaction. Any failure rolls back the whole run, leaving
the data of the last successful run in place.

.. Note::
    Daily new counts are derived from the downloaded files alone; the
    first date of every location is compared against zero rather than
    against the data already in the database.

License:       MIT
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import logging
from io import BytesIO
from typing import Callable, Iterable

# 3rd party:
from sqlalchemy import Table
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from pandas import DataFrame

# Internal:
from db_tables.covid19 import ConfirmedAndDeaths, Recoveries, DB_INSERT_MAX_ROWS
from utilities import func_logger
from utilities.settings import CSV_CHUNK_SIZE
from .exceptions import StorageError
from .fetch import DataSources, fetch_csv
from .parser import WideCsvReader, PairedRowReader
from .transform import build_observations, merge_confirmed_and_deaths
from .writer import upsert_observations

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Header
__license__ = "MIT"
__version__ = "0.1.0"
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'JhuCsseDataCollector'
]


CONFIRMED_AND_DEATHS_UPDATES = [
    "confirmed_cases",
    "new_confirmed",
    "deaths",
    "new_deaths",
]

RECOVERIES_UPDATES = [
    "recoveries",
    "new_recoveries",
]


class JhuCsseDataCollector:
    """
    Ingestion pipelines for the JHU CSSE global time series.

    Two runs of the same pipeline must not overlap against the same
    database; the confirmed/deaths and recoveries pipelines may run
    concurrently with each other.

    Parameters
    ----------
    session_factory: sessionmaker
        Factory for the sessions in which runs are written.

    sources: DataSources
        URLs of the confirmed, deaths and recoveries CSV files.

    fetch: Callable[[str], BytesIO]
        Downloads a CSV file from a URL.

        Default: ``fetch_csv``

    chunk_size: int
        Number of source rows parsed and written at a time.

    max_rows: int
        Maximum number of rows per ``INSERT`` statement.
    """

    def __init__(self, session_factory: sessionmaker,
                 sources: DataSources = DataSources(),
                 fetch: Callable[[str], BytesIO] = fetch_csv,
                 chunk_size: int = CSV_CHUNK_SIZE,
                 max_rows: int = DB_INSERT_MAX_ROWS):
        self._session_factory = session_factory
        self._fetch = fetch
        self.sources = sources
        self.chunk_size = chunk_size
        self.max_rows = max_rows

    @func_logger("confirmed and deaths collector")
    def run_confirmed_and_deaths(self) -> int:
        """
        Refreshes ``confirmed_and_deaths_time_series``.

        The confirmed and deaths files are joined row by row, by
        position.

        Returns
        -------
        int
            Number of observations written.
        """
        confirmed_io = self._fetch(self.sources.confirmed)
        deaths_io = self._fetch(self.sources.deaths)

        with WideCsvReader(confirmed_io, self.chunk_size) as confirmed, \
                WideCsvReader(deaths_io, self.chunk_size) as deaths:
            paired_chunks = PairedRowReader(confirmed, deaths)

            total = self._upsert(
                table=ConfirmedAndDeaths.__table__,
                update_columns=CONFIRMED_AND_DEATHS_UPDATES,
                batches=(
                    merge_confirmed_and_deaths(confirmed_chunk, deaths_chunk)
                    for confirmed_chunk, deaths_chunk in paired_chunks
                )
            )

        logging.info(f"Done updating confirmed and deaths: {total} observations")

        return total

    @func_logger("recoveries collector")
    def run_recoveries(self) -> int:
        """
        Refreshes ``recoveries_time_series``.

        Returns
        -------
        int
            Number of observations written.
        """
        recoveries_io = self._fetch(self.sources.recoveries)

        with WideCsvReader(recoveries_io, self.chunk_size) as recoveries:
            total = self._upsert(
                table=Recoveries.__table__,
                update_columns=RECOVERIES_UPDATES,
                batches=(
                    build_observations(chunk, "recoveries", "new_recoveries")
                    for chunk in recoveries
                )
            )

        logging.info(f"Done updating recoveries: {total} observations")

        return total

    def _upsert(self, table: Table, update_columns, batches: Iterable[DataFrame]) -> int:
        total = 0

        session = self._session_factory()
        try:
            for observations in batches:
                total += upsert_observations(
                    session,
                    table,
                    update_columns,
                    observations,
                    max_rows=self.max_rows
                )

            session.commit()

        except SQLAlchemyError as err:
            session.rollback()
            raise StorageError(f"Failed to update '{table.name}': {err}") from err

        except Exception as err:
            session.rollback()
            raise err

        finally:
            session.close()

        return total
