"""
JHU CSSE time-series collector
==============================

Converts the wide-format JHU CSSE CSV files into a normalised time
series with daily new counts, upserted into the database.
"""

from .collector import JhuCsseDataCollector
from .exceptions import *
from .fetch import DataSources, fetch_csv
from .slug import generate_country_slug
from .parser import WideCsvReader, PairedRowReader, SourceChunk
from .transform import calculate_new_counts, build_observations, merge_confirmed_and_deaths
from .writer import upsert_observations
