#!/usr/bin python3

# Imports
# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
# Python:
import re

# 3rd party:

# Internal:

# ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

__all__ = [
    'generate_country_slug'
]


non_slug_chars = re.compile(r"[^a-zA-Z\- ]")


def generate_country_slug(country: str) -> str:
    """
    Converts a country name into a URL-safe identifier.

    Characters other than ASCII letters, hyphens and spaces are
    removed, every space becomes a hyphen (consecutive spaces are
    not collapsed) and the result is lowercased.

    Parameters
    ----------
    country: str
        Country name as it appears in the source data.

    Returns
    -------
    str
        e.g. ``"Saint Kitts and Nevis"`` -> ``"saint-kitts-and-nevis"``
    """
    slug = non_slug_chars.sub("", country)
    slug = slug.replace(" ", "-")

    return slug.lower()
