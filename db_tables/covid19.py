#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:

# 3rd party:
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import (
    Column, DATE, VARCHAR, BIGINT, FLOAT, PrimaryKeyConstraint
)

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'ConfirmedAndDeaths',
    'Recoveries',
    'KEY_COLUMNS',
    'DB_INSERT_MAX_ROWS',
    'get_engine',
    'get_session_factory',
    'create_tables'
]

# Kept low enough for PostgreSQL's 65,535 bind parameter limit
# at 10 columns per row.
DB_INSERT_MAX_ROWS = 2_000

KEY_COLUMNS = ("province", "country_slug", "date_recorded")


base = declarative_base()


class ConfirmedAndDeaths(base):
    __tablename__ = "confirmed_and_deaths_time_series"

    province = Column("province", VARCHAR(255), nullable=False, default="")
    country = Column("country", VARCHAR(255), nullable=False)
    country_slug = Column("country_slug", VARCHAR(255), nullable=False)
    latitude = Column("latitude", FLOAT(), nullable=False)
    longitude = Column("longitude", FLOAT(), nullable=False)
    confirmed_cases = Column("confirmed_cases", BIGINT(), nullable=False)
    new_confirmed = Column("new_confirmed", BIGINT(), nullable=False)
    deaths = Column("deaths", BIGINT(), nullable=False)
    new_deaths = Column("new_deaths", BIGINT(), nullable=False)
    date_recorded = Column("date_recorded", DATE(), nullable=False)

    __table_args__ = (
        PrimaryKeyConstraint(province, country_slug, date_recorded),
    )


class Recoveries(base):
    __tablename__ = "recoveries_time_series"

    province = Column("province", VARCHAR(255), nullable=False, default="")
    country = Column("country", VARCHAR(255), nullable=False)
    country_slug = Column("country_slug", VARCHAR(255), nullable=False)
    latitude = Column("latitude", FLOAT(), nullable=False)
    longitude = Column("longitude", FLOAT(), nullable=False)
    recoveries = Column("recoveries", BIGINT(), nullable=False)
    new_recoveries = Column("new_recoveries", BIGINT(), nullable=False)
    date_recorded = Column("date_recorded", DATE(), nullable=False)

    __table_args__ = (
        PrimaryKeyConstraint(province, country_slug, date_recorded),
    )


def get_engine(db_url: str, **kwargs) -> Engine:
    """
    Creates the engine shared by the ingestion pipelines and the
    read queries.

    Parameters
    ----------
    db_url: str
        SQLAlchemy database URL.

    kwargs
        Forwarded to ``sqlalchemy.create_engine``.

    Returns
    -------
    Engine
    """
    if db_url is None:
        raise ValueError("No database URL supplied - is `DB_URL` set?")

    kwargs.setdefault("pool_pre_ping", True)

    return create_engine(db_url, **kwargs)


def get_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine)


def create_tables(engine: Engine) -> None:
    base.metadata.create_all(engine, checkfirst=True)
