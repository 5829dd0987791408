#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:

# 3rd party:

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~


COUNTRIES = """\
SELECT MIN(country) AS country,
       country_slug
FROM confirmed_and_deaths_time_series
GROUP BY country_slug
ORDER BY country_slug;\
"""


GLOBAL_STATS = """\
SELECT cd.confirmed,
       cd.new_confirmed,
       cd.deaths,
       cd.new_deaths,
       r.recoveries,
       r.new_recoveries
FROM (
    SELECT SUM(confirmed_cases) AS confirmed,
           SUM(new_confirmed)   AS new_confirmed,
           SUM(deaths)          AS deaths,
           SUM(new_deaths)      AS new_deaths
    FROM confirmed_and_deaths_time_series
    WHERE date_recorded = (
        SELECT MAX(date_recorded) FROM confirmed_and_deaths_time_series
    )
) AS cd
CROSS JOIN (
    SELECT SUM(recoveries)     AS recoveries,
           SUM(new_recoveries) AS new_recoveries
    FROM recoveries_time_series
    WHERE date_recorded = (
        SELECT MAX(date_recorded) FROM recoveries_time_series
    )
) AS r;\
"""


SUMMARY = """\
SELECT cd.country,
       cd.country_slug,
       cd.confirmed,
       cd.new_confirmed,
       cd.deaths,
       cd.new_deaths,
       COALESCE(r.recoveries, 0)     AS recoveries,
       COALESCE(r.new_recoveries, 0) AS new_recoveries
FROM (
    SELECT MIN(country)         AS country,
           country_slug,
           SUM(confirmed_cases) AS confirmed,
           SUM(new_confirmed)   AS new_confirmed,
           SUM(deaths)          AS deaths,
           SUM(new_deaths)      AS new_deaths
    FROM confirmed_and_deaths_time_series
    WHERE date_recorded = (
        SELECT MAX(date_recorded) FROM confirmed_and_deaths_time_series
    )
    GROUP BY country_slug
) AS cd
LEFT JOIN (
    SELECT country_slug,
           SUM(recoveries)     AS recoveries,
           SUM(new_recoveries) AS new_recoveries
    FROM recoveries_time_series
    WHERE date_recorded = (
        SELECT MAX(date_recorded) FROM recoveries_time_series
    )
    GROUP BY country_slug
) AS r ON r.country_slug = cd.country_slug
ORDER BY cd.country_slug;\
"""


# Column and table names are filled in from a fixed
# mapping - see `reader.STATUS_COLUMNS`.
TIME_SERIES = """\
SELECT country,
       country_slug,
       province,
       {value_column} AS {status},
       {new_column}   AS new_{status},
       latitude,
       longitude,
       date_recorded
FROM {table}
WHERE country_slug = :country_slug
ORDER BY province, date_recorded;\
"""


AGGREGATED_TIME_SERIES = """\
SELECT MIN(country)        AS country,
       country_slug,
       SUM({value_column}) AS {status},
       SUM({new_column})   AS new_{status},
       date_recorded
FROM {table}
WHERE country_slug = :country_slug
GROUP BY country_slug, date_recorded
ORDER BY date_recorded;\
"""


AGGREGATED_TIME_SERIES_ALL = """\
SELECT cd.country,
       cd.country_slug,
       cd.confirmed,
       cd.new_confirmed,
       cd.deaths,
       cd.new_deaths,
       r.recoveries,
       r.new_recoveries,
       cd.date_recorded
FROM (
    SELECT MIN(country)         AS country,
           country_slug,
           SUM(confirmed_cases) AS confirmed,
           SUM(new_confirmed)   AS new_confirmed,
           SUM(deaths)          AS deaths,
           SUM(new_deaths)      AS new_deaths,
           date_recorded
    FROM confirmed_and_deaths_time_series
    WHERE country_slug = :country_slug
    GROUP BY country_slug, date_recorded
) AS cd
JOIN (
    SELECT SUM(recoveries)     AS recoveries,
           SUM(new_recoveries) AS new_recoveries,
           date_recorded
    FROM recoveries_time_series
    WHERE country_slug = :country_slug
    GROUP BY date_recorded
) AS r ON r.date_recorded = cd.date_recorded
ORDER BY cd.date_recorded;\
"""
