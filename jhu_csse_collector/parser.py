#!/usr/bin python3

"""
Wide-format CSV reader
----------------------

Reads the JHU CSSE global time-series files, where each row is a
location and every column from the fifth onwards holds the cumulative
count for the date named in the header::

    Province/State,Country/Region,Lat,Long,1/22/20,1/23/20,...
    ,Afghanistan,33.93911,67.709953,0,0,...

The data are read in chunks and every chunk is validated and converted
before it is handed over; a single invalid field aborts the whole read.

License:       MIT
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import re
from datetime import datetime, date
from typing import NamedTuple, List, Iterator, Tuple, BinaryIO

# 3rd party:
from pandas import DataFrame, RangeIndex, read_csv, to_numeric
from pandas.errors import ParserError, EmptyDataError
from numpy import argwhere, iinfo

# Internal:
from utilities.settings import CSV_CHUNK_SIZE
from .exceptions import ParseError, FieldError, AlignmentError
from .slug import generate_country_slug

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Header
__license__ = "MIT"
__version__ = "0.1.0"
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'SourceChunk',
    'WideCsvReader',
    'PairedRowReader',
    'parse_dates',
    'DATE_FORMAT',
    'LOCATION_COLUMNS'
]


DATE_FORMAT = "%m/%d/%y"

# Fixed leading columns, in source order.
LOCATION_COLUMNS = ["province", "country", "latitude", "longitude"]

COUNT_PATTERN = r"[0-9]+"

# Largest count stored in a BIGINT column.
MAX_COUNT = str(iinfo("int64").max)

# pandas renames repeated header labels to "label.1", "label.2", ...
mangled_label = re.compile(r"^(.+)\.[0-9]+$")


class SourceChunk(NamedTuple):
    # province, country, country_slug, latitude, longitude
    locations: DataFrame
    # int64, one column per date
    counts: DataFrame


def parse_dates(labels: List[str]) -> List[date]:
    """
    Parses the date labels of the header.

    Parameters
    ----------
    labels: List[str]
        Header labels from the fifth column onwards, e.g. ``"1/22/20"``.

    Returns
    -------
    List[date]

    Raises
    ------
    FieldError
        Where a label does not match ``DATE_FORMAT``.
    """
    dates = list()

    for column, label in enumerate(labels, start=len(LOCATION_COLUMNS)):
        try:
            dates.append(datetime.strptime(label, DATE_FORMAT).date())
        except ValueError as err:
            raise FieldError(
                f"Invalid date label '{label}' in header column {column}",
                row=0,
                column=column
            ) from err

    return dates


def check_repeated_labels(labels: List[str]):
    seen = set()

    for column, label in enumerate(labels, start=len(LOCATION_COLUMNS)):
        found = mangled_label.match(label)

        if found is not None and found.group(1) in seen:
            raise ParseError(
                f"Repeated date label '{found.group(1)}' in header column {column}"
            )

        seen.add(label)


def check_repeated_dates(labels: List[str], dates: List[date]):
    # Labels may differ in spelling (e.g. "1/2/20" and "01/02/20").
    seen = dict()

    for column, (label, day) in enumerate(zip(labels, dates), start=len(LOCATION_COLUMNS)):
        if day in seen:
            raise ParseError(
                f"Repeated date '{label}' in header column {column}, "
                f"already given as '{seen[day]}'"
            )

        seen[day] = label


def to_coordinates(values, row_index, column: int) -> list:
    coordinates = to_numeric(values, errors="coerce")
    invalid = coordinates.isna().to_numpy()

    if invalid.any():
        position = argwhere(invalid)[0][0]
        raise FieldError(
            f"Invalid coordinate '{values.iloc[position]}' at "
            f"row {row_index[position] + 1}, column {column}",
            row=row_index[position] + 1,
            column=column
        )

    return coordinates.astype(float).to_numpy()


class WideCsvReader:
    """
    Lazy, single-pass reader for a wide-format time-series CSV.

    The header is consumed on construction, so ``header`` and ``dates``
    are available before any data row is read.

    Parameters
    ----------
    fp: BinaryIO
        CSV byte stream.

    chunk_size: int
        Number of data rows converted at a time.

        Default: ``CSV_CHUNK_SIZE``
    """

    def __init__(self, fp: BinaryIO, chunk_size: int = CSV_CHUNK_SIZE):
        self.chunk_size = chunk_size
        self._offset = 0

        try:
            self._chunks = read_csv(
                fp,
                header=0,
                dtype=str,
                keep_default_na=False,
                chunksize=chunk_size
            )
            first_chunk = next(self._chunks, None)
        except EmptyDataError as err:
            raise ParseError("The CSV document is empty") from err
        except (ParserError, UnicodeDecodeError) as err:
            raise ParseError(f"Malformed CSV document: {err}") from err

        if first_chunk is None:
            raise ParseError("The CSV document has no header row")

        self.header: List[str] = list(map(str, first_chunk.columns))

        if len(self.header) < len(LOCATION_COLUMNS):
            raise ParseError(
                f"Expected at least {len(LOCATION_COLUMNS)} columns in "
                f"the header, found {len(self.header)}"
            )

        date_labels = self.header[len(LOCATION_COLUMNS):]

        check_repeated_labels(date_labels)
        self.dates: List[date] = parse_dates(date_labels)
        check_repeated_dates(date_labels, self.dates)
        self._pending = first_chunk
        self._exhausted = False
        self._closed = False

    def __enter__(self) -> 'WideCsvReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __iter__(self) -> Iterator[SourceChunk]:
        return self

    def __next__(self) -> SourceChunk:
        while True:
            if self._pending is not None:
                chunk, self._pending = self._pending, None
            elif self._exhausted:
                raise StopIteration
            else:
                try:
                    chunk = next(self._chunks)
                except StopIteration:
                    self._exhausted = True
                    raise
                except (ParserError, UnicodeDecodeError) as err:
                    raise ParseError(f"Malformed CSV document: {err}") from err

            if chunk.shape[0]:
                return self._convert(chunk)

    def close(self):
        if not self._closed:
            self._chunks.close()
            self._closed = True

    def _convert(self, chunk: DataFrame) -> SourceChunk:
        # An extra leading field in the first row makes pandas
        # use the first column as the index.
        if not isinstance(chunk.index, RangeIndex):
            raise ParseError(
                f"Data rows have more fields than the header ({len(self.header)})"
            )

        chunk.index = RangeIndex(self._offset, self._offset + chunk.shape[0])
        self._offset += chunk.shape[0]

        missing = chunk.isna().to_numpy()
        if missing.any():
            row = chunk.index[argwhere(missing)[0][0]]
            raise ParseError(
                f"Row {row + 1} has fewer fields than the header ({len(self.header)})"
            )

        countries = chunk.iloc[:, 1]

        locations = DataFrame(
            {
                "province": chunk.iloc[:, 0].to_numpy(),
                "country": countries.to_numpy(),
                "country_slug": countries.map(generate_country_slug).to_numpy(),
                "latitude": to_coordinates(chunk.iloc[:, 2], chunk.index, column=2),
                "longitude": to_coordinates(chunk.iloc[:, 3], chunk.index, column=3),
            },
            index=chunk.index
        )

        return SourceChunk(
            locations=locations,
            counts=self._convert_counts(chunk.iloc[:, len(LOCATION_COLUMNS):])
        )

    def _convert_counts(self, raw_counts: DataFrame) -> DataFrame:
        if not raw_counts.shape[1]:
            return DataFrame(index=raw_counts.index, columns=self.dates, dtype="int64")

        digits = raw_counts.apply(lambda column: column.str.lstrip("0"))
        lengths = digits.apply(lambda column: column.str.len())

        in_range = (
            (lengths < len(MAX_COUNT)) |
            ((lengths == len(MAX_COUNT)) & (digits <= MAX_COUNT))
        )

        valid = (
            raw_counts
            .apply(lambda column: column.str.fullmatch(COUNT_PATTERN))
            .to_numpy(dtype=bool)
        ) & in_range.to_numpy(dtype=bool)

        if not valid.all():
            position, column = argwhere(~valid)[0]
            row = raw_counts.index[position]
            raise FieldError(
                f"Invalid count '{raw_counts.iat[position, column]}' at row {row + 1}, "
                f"column {column + len(LOCATION_COLUMNS)} ({self.header[column + len(LOCATION_COLUMNS)]})",
                row=row + 1,
                column=column + len(LOCATION_COLUMNS)
            )

        return DataFrame(
            raw_counts.to_numpy().astype("int64"),
            index=raw_counts.index,
            columns=self.dates
        )


class PairedRowReader:
    """
    Joins two ``WideCsvReader`` streams row by row, by position.

    The streams are expected to list the same locations in the same
    order with the same dates; rows are never matched by key. Any
    divergence raises an ``AlignmentError`` rather than being corrected.

    Parameters
    ----------
    first: WideCsvReader
        Leading stream; its locations are used downstream.

    second: WideCsvReader
        Stream paired with ``first``.
    """

    def __init__(self, first: WideCsvReader, second: WideCsvReader):
        if first.chunk_size != second.chunk_size:
            raise ValueError("Paired readers must use the same chunk size.")

        if first.dates != second.dates:
            raise AlignmentError(
                f"The paired streams do not share the same date columns: "
                f"{len(first.dates)} vs {len(second.dates)} dates"
            )

        self.first = first
        self.second = second
        self.dates = first.dates

    def __iter__(self) -> Iterator[Tuple[SourceChunk, SourceChunk]]:
        return self

    def __next__(self) -> Tuple[SourceChunk, SourceChunk]:
        first_chunk = next(self.first, None)
        second_chunk = next(self.second, None)

        if first_chunk is None and second_chunk is None:
            raise StopIteration

        if first_chunk is None or second_chunk is None:
            exhausted = "first" if first_chunk is None else "second"
            raise AlignmentError(
                f"The {exhausted} stream was exhausted before the other one"
            )

        first_size = first_chunk.locations.shape[0]
        second_size = second_chunk.locations.shape[0]

        if first_size != second_size:
            raise AlignmentError(
                f"The paired streams have a different number of rows "
                f"({first_chunk.locations.index[0] + first_size} vs "
                f"{second_chunk.locations.index[0] + second_size})"
            )

        key_columns = ["province", "country"]
        mismatched = (
            first_chunk.locations.loc[:, key_columns] !=
            second_chunk.locations.loc[:, key_columns]
        ).any(axis=1)

        if mismatched.any():
            row = mismatched.idxmax()
            raise AlignmentError(
                f"Locations differ at row {row + 1}: "
                f"{tuple(first_chunk.locations.loc[row, key_columns])} vs "
                f"{tuple(second_chunk.locations.loc[row, key_columns])}"
            )

        return first_chunk, second_chunk
