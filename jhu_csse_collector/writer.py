#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
from typing import Iterable

# 3rd party:
from sqlalchemy import Table
from sqlalchemy.orm import Session
from sqlalchemy.dialects.postgresql import insert as postgres_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from pandas import DataFrame

# Internal:
from db_tables.covid19 import KEY_COLUMNS, DB_INSERT_MAX_ROWS
from .exceptions import StorageError

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'upsert_observations',
    'get_insert'
]


insert_constructors = {
    "postgresql": postgres_insert,
    "sqlite": sqlite_insert,
}


def get_insert(session: Session):
    dialect = session.get_bind().dialect.name

    try:
        return insert_constructors[dialect]
    except KeyError:
        raise StorageError(f"Upserts are not supported for the '{dialect}' dialect")


def upsert_observations(session: Session, table: Table, update_columns: Iterable[str],
                        data: DataFrame, max_rows: int = DB_INSERT_MAX_ROWS) -> int:
    """
    Inserts observations, or updates their counts where an observation
    with the same (province, country_slug, date_recorded) already exists.

    Statements are executed on the connection of ``session``; nothing is
    committed here.

    Parameters
    ----------
    session: Session
        Session holding the transaction of the current run.

    table: Table
        Destination table.

    update_columns: Iterable[str]
        Columns overwritten when the natural key already exists.

    data: DataFrame
        Observations, one per row, with columns matching ``table``.

    max_rows: int
        Maximum number of rows per ``INSERT`` statement.

    Returns
    -------
    int
        Number of observations written.
    """
    if data.size == 0:
        return 0

    # Where a key appears more than once, the last occurrence wins.
    data = data.drop_duplicates(list(KEY_COLUMNS), keep="last")

    insert = get_insert(session)
    connection = session.connection()

    for start in range(0, data.shape[0], max_rows):
        records = data.iloc[start: start + max_rows].to_dict(orient="records")

        insert_stmt = insert(table).values(records)
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=list(KEY_COLUMNS),
            set_={
                name: insert_stmt.excluded[name]
                for name in update_columns
            }
        )

        connection.execute(stmt)

    return data.shape[0]
