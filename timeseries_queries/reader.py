#!/usr/bin python3

"""
Read-side queries over the collected time series.

All functions take the session factory shared with the collector, and
only ever see committed data.

License:       MIT
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from typing import Dict, Tuple

# 3rd party:
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from pandas import DataFrame, read_sql, notna

# Internal:
from .queries import (
    COUNTRIES, GLOBAL_STATS, SUMMARY, TIME_SERIES,
    AGGREGATED_TIME_SERIES, AGGREGATED_TIME_SERIES_ALL
)

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Header
__license__ = "MIT"
__version__ = "0.1.0"
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'get_countries',
    'get_global_stats',
    'get_summary',
    'get_time_series',
    'get_aggregated_time_series',
    'STATUS_COLUMNS'
]


# status: (table, cumulative column, new column)
STATUS_COLUMNS = {
    "confirmed": ("confirmed_and_deaths_time_series", "confirmed_cases", "new_confirmed"),
    "deaths": ("confirmed_and_deaths_time_series", "deaths", "new_deaths"),
    "recoveries": ("recoveries_time_series", "recoveries", "new_recoveries"),
}

STATS_COLUMNS = [
    "confirmed",
    "new_confirmed",
    "deaths",
    "new_deaths",
    "recoveries",
    "new_recoveries",
]


def read_query(session_factory: sessionmaker, query: str, **kwargs) -> DataFrame:
    session = session_factory()
    try:
        results = read_sql(
            text(query),
            con=session.connection(),
            **kwargs
        )
    except Exception as err:
        session.rollback()
        raise err
    finally:
        session.close()

    return results


def format_query(template: str, status: str) -> str:
    if status not in STATUS_COLUMNS:
        raise ValueError(
            f"Invalid status '{status}' - expected one of: "
            f"{str.join(', ', STATUS_COLUMNS)}"
        )

    table, value_column, new_column = STATUS_COLUMNS[status]

    return template.format(
        table=table,
        status=status,
        value_column=value_column,
        new_column=new_column
    )


def to_totals(values) -> Dict[str, int]:
    return {
        key: int(value) if notna(value) else 0
        for key, value in values.items()
    }


def get_countries(session_factory: sessionmaker) -> DataFrame:
    return read_query(session_factory, COUNTRIES)


def get_global_stats(session_factory: sessionmaker) -> Dict[str, int]:
    """
    World totals as of the latest date in each table.

    Returns
    -------
    Dict[str, int]
        Keys as in ``STATS_COLUMNS``; zero where no data exist.
    """
    stats = read_query(session_factory, GLOBAL_STATS)

    return to_totals(stats.loc[0, STATS_COLUMNS])


def get_summary(session_factory: sessionmaker) -> Tuple[Dict[str, int], DataFrame]:
    """
    Country totals as of the latest date in each table.

    Returns
    -------
    Tuple[Dict[str, int], DataFrame]
        World totals (the sum of all countries) and one row per country.
    """
    countries = read_query(session_factory, SUMMARY)

    world = to_totals(countries.loc[:, STATS_COLUMNS].sum())

    return world, countries


def get_time_series(session_factory: sessionmaker, country_slug: str, status: str) -> DataFrame:
    """
    Time series of every location in a country.

    Parameters
    ----------
    session_factory: sessionmaker

    country_slug: str

    status: str
        One of ``confirmed``, ``deaths`` or ``recoveries``.

    Returns
    -------
    DataFrame
    """
    query = format_query(TIME_SERIES, status)

    return read_query(
        session_factory,
        query,
        params={"country_slug": country_slug},
        parse_dates=["date_recorded"]
    )


def get_aggregated_time_series(session_factory: sessionmaker, country_slug: str,
                               status: str) -> DataFrame:
    """
    Time series of a country, summed over all of its locations.

    Parameters
    ----------
    session_factory: sessionmaker

    country_slug: str

    status: str
        One of ``confirmed``, ``deaths``, ``recoveries`` or ``all``.

    Returns
    -------
    DataFrame
    """
    if status == "all":
        query = AGGREGATED_TIME_SERIES_ALL
    else:
        query = format_query(AGGREGATED_TIME_SERIES, status)

    return read_query(
        session_factory,
        query,
        params={"country_slug": country_slug},
        parse_dates=["date_recorded"]
    )
