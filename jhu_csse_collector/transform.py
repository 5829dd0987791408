#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:

# 3rd party:
from pandas import DataFrame

# Internal:
from .parser import SourceChunk

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'calculate_new_counts',
    'melt_counts',
    'build_observations',
    'merge_confirmed_and_deaths',
    'OBSERVATION_LOCATION_COLUMNS'
]


OBSERVATION_LOCATION_COLUMNS = [
    "province",
    "country",
    "country_slug",
    "latitude",
    "longitude",
]


def calculate_new_counts(cumulative: DataFrame) -> DataFrame:
    """
    Derives daily new counts from cumulative counts.

    Each row is a location and each column a date, in increasing order.
    The first date is compared against zero, and every following date
    against the one before it. Decreases in the cumulative count produce
    a new count of zero; the cumulative values themselves are not altered.

    Parameters
    ----------
    cumulative: DataFrame
        Integer cumulative counts.

    Returns
    -------
    DataFrame
        Same shape and labels as ``cumulative``.
    """
    previous = cumulative.shift(periods=1, axis=1, fill_value=0)

    return (cumulative - previous).clip(lower=0)


def melt_counts(counts: DataFrame, value_name: str, new_name: str) -> DataFrame:
    """
    Converts wide counts into one row per (location, date), ordered by
    source row and then by date.
    """
    new_counts = calculate_new_counts(counts)

    cumulative = counts.melt(
        var_name="date_recorded",
        value_name=value_name,
        ignore_index=False
    )

    new = new_counts.melt(
        var_name="date_recorded",
        value_name=new_name,
        ignore_index=False
    )

    return (
        cumulative
        .assign(**{new_name: new.loc[:, new_name].to_numpy()})
        .sort_index(kind="stable")
    )


def build_observations(chunk: SourceChunk, value_name: str, new_name: str) -> DataFrame:
    columns = [*OBSERVATION_LOCATION_COLUMNS, "date_recorded", value_name, new_name]

    if not chunk.counts.shape[1]:
        return DataFrame(columns=columns)

    return (
        melt_counts(chunk.counts, value_name, new_name)
        .join(chunk.locations)
        .loc[:, columns]
        .reset_index(drop=True)
    )


def merge_confirmed_and_deaths(confirmed: SourceChunk, deaths: SourceChunk) -> DataFrame:
    """
    Builds one observation per (location, date) carrying both the
    confirmed cases and the deaths of a pair of aligned chunks.

    Location details are taken from ``confirmed``; the two chunks
    must already be aligned (see ``PairedRowReader``).
    """
    observations = build_observations(confirmed, "confirmed_cases", "new_confirmed")

    if not observations.size:
        return observations.assign(deaths=None, new_deaths=None)

    death_counts = melt_counts(deaths.counts, "deaths", "new_deaths")

    return observations.assign(
        deaths=death_counts.loc[:, "deaths"].to_numpy(),
        new_deaths=death_counts.loc[:, "new_deaths"].to_numpy()
    )
