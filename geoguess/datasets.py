"""
Dataset loading with an on-disk cache.

Strategy:
  1. Use the cached copy under the data dir if present
  2. Otherwise download with exponential backoff on transient errors
  3. Write the payload to the cache for the next start-up

Two datasets feed the catalog: the reference country list (JSON array)
and the world boundary topology (TopoJSON).
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Optional

import httpx

from geoguess.aliases import AliasIndex
from geoguess.catalog import Catalog, build_catalog
from geoguess.config import get_settings
from geoguess.topology import topology_features

logger = logging.getLogger(__name__)

COUNTRIES_CACHE_FILE = "countries.json"
BOUNDARIES_CACHE_FILE = "countries-50m.json"


class DatasetUnavailableError(RuntimeError):
    """A dataset could neither be read from cache nor downloaded."""


def fetch_json(url: str, client: Optional[httpx.Client] = None) -> Any:
    """GET a JSON document, retrying request errors and HTTP 429."""
    settings = get_settings().data
    owns_client = client is None
    client = client or httpx.Client(timeout=settings.request_timeout, follow_redirects=True)

    try:
        for attempt in range(settings.max_retries):
            try:
                resp = client.get(url)
                resp.raise_for_status()
                return resp.json()
            except httpx.HTTPStatusError as e:
                if e.response.status_code != 429:
                    raise DatasetUnavailableError(f"{url}: HTTP {e.response.status_code}") from e
                wait = settings.backoff_base ** (attempt + 1)
                logger.warning("Rate limited fetching %s, backing off %.1fs", url, wait)
                time.sleep(wait)
            except httpx.RequestError as e:
                wait = settings.backoff_base ** (attempt + 1)
                logger.warning("Request error fetching %s (attempt %d/%d): %s, backing off %.1fs",
                               url, attempt + 1, settings.max_retries, e, wait)
                time.sleep(wait)
    finally:
        if owns_client:
            client.close()

    raise DatasetUnavailableError(f"{url}: all {settings.max_retries} retries exhausted")


def load_cached_json(url: str, cache_file: Path, client: Optional[httpx.Client] = None) -> Any:
    if cache_file.exists():
        logger.debug("Dataset cache HIT: %s", cache_file)
        with cache_file.open("r", encoding="utf-8") as f:
            return json.load(f)

    logger.info("Dataset cache MISS: downloading %s", url)
    data = fetch_json(url, client)
    cache_file.parent.mkdir(parents=True, exist_ok=True)
    with cache_file.open("w", encoding="utf-8") as f:
        json.dump(data, f)
    return data


def load_reference_countries(data_dir: Optional[Path] = None,
                             client: Optional[httpx.Client] = None) -> list[dict]:
    settings = get_settings().data
    data_dir = data_dir or settings.data_dir
    data = load_cached_json(settings.countries_url, data_dir / COUNTRIES_CACHE_FILE, client)
    if not isinstance(data, list):
        raise DatasetUnavailableError("Reference country dataset is not a JSON array")
    return data


def load_boundary_features(data_dir: Optional[Path] = None,
                           client: Optional[httpx.Client] = None) -> list[dict]:
    settings = get_settings().data
    data_dir = data_dir or settings.data_dir
    topology = load_cached_json(settings.boundaries_url, data_dir / BOUNDARIES_CACHE_FILE, client)
    return topology_features(topology, "countries")


def load_catalog(data_dir: Optional[Path] = None, client: Optional[httpx.Client] = None) -> Catalog:
    return build_catalog(
        load_reference_countries(data_dir, client),
        load_boundary_features(data_dir, client),
    )


def load_game_data(data_dir: Optional[Path] = None,
                   client: Optional[httpx.Client] = None) -> tuple[Catalog, AliasIndex]:
    """Build the catalog and its alias index once, at start-up."""
    catalog = load_catalog(data_dir, client)
    return catalog, AliasIndex.build(catalog)
