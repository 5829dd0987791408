#!/usr/bin python3

"""
Collector trigger
-----------------

Runs the JHU CSSE collector pipelines once on start-up and then at a
fixed interval. The two pipelines of a tick run concurrently; a tick
completes before the next one starts, so a pipeline never overlaps
with itself.

Failures are logged and reported in the tick's results. They never
stop the process; the next tick is the retry.

License:       MIT
"""

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import logging
from asyncio import get_event_loop, gather, sleep, run
from functools import partial
from time import perf_counter
from typing import Callable, List, NamedTuple, Optional, Union

# 3rd party:
from orjson import dumps

# Internal:
from db_tables.covid19 import get_engine, get_session_factory, create_tables
from jhu_csse_collector import JhuCsseDataCollector
from utilities import configure_logging
from utilities.settings import DB_URL, COLLECTOR_INTERVAL, LOG_LEVEL

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Header
__license__ = "MIT"
__version__ = "0.1.0"
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'RunResult',
    'execute_run',
    'run_collectors',
    'main',
    'start'
]


class RunResult(NamedTuple):
    name: str
    success: bool
    rows: int = 0
    error: Union[str, None] = None
    elapsed: float = 0.0


def execute_run(name: str, func: Callable[[], int]) -> RunResult:
    start = perf_counter()

    try:
        rows = func()
    except Exception as err:
        logging.exception(f"Collector '{name}' failed: {err}")

        return RunResult(
            name=name,
            success=False,
            error=f"{type(err).__name__}: {err}",
            elapsed=round(perf_counter() - start, 3)
        )

    return RunResult(
        name=name,
        success=True,
        rows=rows,
        elapsed=round(perf_counter() - start, 3)
    )


async def run_collectors(collector: JhuCsseDataCollector) -> List[RunResult]:
    """
    Runs both pipelines concurrently and reports their results.

    Parameters
    ----------
    collector: JhuCsseDataCollector

    Returns
    -------
    List[RunResult]
        One result per pipeline, in a fixed order: confirmed and deaths,
        then recoveries.
    """
    event_loop = get_event_loop()

    tasks = [
        event_loop.run_in_executor(None, partial(execute_run, name, func))
        for name, func in (
            ("confirmed_and_deaths", collector.run_confirmed_and_deaths),
            ("recoveries", collector.run_recoveries),
        )
    ]

    results = await gather(*tasks)

    report = dumps([result._asdict() for result in results])
    logging.info(f"--- Collector run completed: {report.decode()}")

    return list(results)


async def main(collector: JhuCsseDataCollector, interval: float = COLLECTOR_INTERVAL,
               max_ticks: Optional[int] = None) -> List[List[RunResult]]:
    """
    Runs the collectors immediately and then every ``interval`` seconds.

    Parameters
    ----------
    collector: JhuCsseDataCollector

    interval: float
        Seconds to wait between the end of a tick and the next one.

    max_ticks: Optional[int]
        Stops after this many ticks. Runs indefinitely if ``None``.

    Returns
    -------
    List[List[RunResult]]
        Results of every tick - only reached where ``max_ticks`` is set.
    """
    history = list()
    tick = 0

    while max_ticks is None or tick < max_ticks:
        logging.info(f"--- Collector trigger has fired (tick {tick})")

        results = await run_collectors(collector)
        tick += 1

        if max_ticks is not None:
            history.append(results)

            if tick >= max_ticks:
                break

        await sleep(interval)

    return history


def start():
    """
    Process entry point: configures logging, prepares the database
    from ``DB_URL`` and runs the trigger indefinitely.
    """
    configure_logging(LOG_LEVEL)

    engine = get_engine(DB_URL)
    create_tables(engine)

    collector = JhuCsseDataCollector(get_session_factory(engine))

    try:
        run(main(collector))
    finally:
        engine.dispose()
