#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import logging
from io import BytesIO
from http import HTTPStatus
from typing import NamedTuple

# 3rd party:
from requests import get as get_request
from requests.exceptions import RequestException

# Internal:
from utilities.settings import (
    JHU_CSSE_BASE_URL, CONFIRMED_FILE, DEATHS_FILE,
    RECOVERIES_FILE, REQUEST_TIMEOUT
)
from .exceptions import TransportError

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'DataSources',
    'fetch_csv'
]


class DataSources(NamedTuple):
    confirmed: str = JHU_CSSE_BASE_URL + CONFIRMED_FILE
    deaths: str = JHU_CSSE_BASE_URL + DEATHS_FILE
    recoveries: str = JHU_CSSE_BASE_URL + RECOVERIES_FILE


def fetch_csv(url: str, timeout: float = REQUEST_TIMEOUT) -> BytesIO:
    """
    Downloads a CSV document.

    Parameters
    ----------
    url: str
        Full URL of the CSV file.

    timeout: float
        Request timeout in seconds.

    Returns
    -------
    BytesIO
        Raw content of the response, positioned at the beginning.

    Raises
    ------
    TransportError
        On network failures or where the response status is not 200.
    """
    logging.info(f"> Downloading data from '{url}'")

    try:
        response = get_request(url=url, timeout=timeout)
    except RequestException as err:
        raise TransportError(f"Failed to download the data from {url}: {err}") from err

    logging.info(
        f"> Download request completed with "
        f"status {response.status_code}: {url}"
    )

    if response.status_code != HTTPStatus.OK:
        raise TransportError(
            f"Failed to download the data from {url}: "
            f"HTTP {response.status_code}"
        )

    data_bin = BytesIO(response.content)
    data_bin.seek(0)

    return data_bin
