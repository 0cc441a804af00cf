"""
Regulatory catalog loading.

Reads the article catalog from a JSON file and validates it into a
RegulatoryCatalog. Loaded catalogs are cached per resolved path.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from compliance_engine.compliance.models import RegulatoryCatalog
from compliance_engine.config import get_settings

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """Raised when the regulatory catalog cannot be loaded."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


def parse_catalog(data: Union[RegulatoryCatalog, dict[str, Any]]) -> RegulatoryCatalog:
    """Validate raw catalog data."""
    if isinstance(data, RegulatoryCatalog):
        return data
    try:
        return RegulatoryCatalog.model_validate(data)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid regulatory catalog: {e}") from e


@lru_cache(maxsize=8)
def _load_cached(resolved_path: str) -> RegulatoryCatalog:
    path = Path(resolved_path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Catalog file not found: {path}", str(path)) from e
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Could not read catalog {path}: {e}", str(path)) from e

    try:
        catalog = parse_catalog(raw)
    except CatalogLoadError as e:
        e.path = str(path)
        raise

    logger.info(
        f"Loaded regulatory catalog {path.name} "
        f"(version={catalog.metadata.version}, articles={len(catalog.iter_articles())})"
    )
    return catalog


def load_catalog(path: Optional[Union[str, Path]] = None) -> RegulatoryCatalog:
    """
    Load the regulatory catalog.

    Args:
        path: JSON file to load; defaults to COMPLIANCE_CATALOG_PATH

    Raises:
        CatalogLoadError: If no path is configured, or the file is missing,
            unreadable or does not validate
    """
    if path is None:
        path = get_settings().compliance.catalog_path
    if not path:
        raise CatalogLoadError("No catalog path given and COMPLIANCE_CATALOG_PATH is not set")

    return _load_cached(str(Path(path).resolve()))


def clear_catalog_cache() -> None:
    """Drop cached catalogs so the next load re-reads from disk."""
    _load_cached.cache_clear()
