"""
Unit tests for regulatory catalog loading.
"""

import json

import pytest

from compliance_engine.compliance import (
    CatalogLoadError,
    RegulatoryCatalog,
    clear_catalog_cache,
    load_catalog,
    parse_catalog,
)
from compliance_engine.config import get_settings


@pytest.fixture(autouse=True)
def fresh_cache():
    """Isolate catalog and settings caches between tests."""
    clear_catalog_cache()
    get_settings.cache_clear()
    yield
    clear_catalog_cache()
    get_settings.cache_clear()


@pytest.fixture
def catalog_file(tmp_path, sample_catalog_data):
    """Sample catalog written to disk."""
    path = tmp_path / "space_act.json"
    path.write_text(json.dumps(sample_catalog_data), encoding="utf-8")
    return path


class TestParseCatalog:
    """Tests for catalog validation."""

    def test_flattens_in_document_order(self, sample_catalog):
        """Test articles from titles, chapters and sections are flattened in order."""
        numbers = [a.number for a in sample_catalog.iter_articles()]

        assert numbers == [1, 2, 6, 7, 10, 33, 55, 74, 96, 105]

    def test_extra_keys_tolerated(self, sample_catalog):
        """Test unknown top-level keys are kept, not rejected."""
        assert "decision_tree" in sample_catalog.model_extra

    def test_model_passthrough(self, sample_catalog):
        """Test an already-validated catalog is returned unchanged."""
        assert parse_catalog(sample_catalog) is sample_catalog

    def test_invalid_catalog(self):
        """Test malformed catalog data raises CatalogLoadError."""
        with pytest.raises(CatalogLoadError):
            parse_catalog({"titles": [{"number": 1}]})


class TestLoadCatalog:
    """Tests for loading catalogs from disk."""

    def test_load_from_path(self, catalog_file):
        """Test a catalog file loads and validates."""
        catalog = load_catalog(catalog_file)

        assert isinstance(catalog, RegulatoryCatalog)
        assert catalog.metadata.version == "1.0"
        assert len(catalog.iter_articles()) == 10

    def test_cached_per_path(self, catalog_file):
        """Test repeated loads of the same path return the cached catalog."""
        assert load_catalog(catalog_file) is load_catalog(str(catalog_file))

    def test_cache_cleared(self, catalog_file):
        """Test clearing the cache forces a re-read."""
        first = load_catalog(catalog_file)
        clear_catalog_cache()

        assert load_catalog(catalog_file) is not first

    def test_path_from_settings(self, catalog_file, monkeypatch):
        """Test the configured catalog path is used by default."""
        monkeypatch.setenv("COMPLIANCE_CATALOG_PATH", str(catalog_file))
        get_settings.cache_clear()

        catalog = load_catalog()

        assert catalog.metadata.total_articles == 119

    def test_no_path_configured(self, monkeypatch):
        """Test loading without any path fails clearly."""
        monkeypatch.delenv("COMPLIANCE_CATALOG_PATH", raising=False)

        with pytest.raises(CatalogLoadError, match="COMPLIANCE_CATALOG_PATH"):
            load_catalog()

    def test_missing_file(self, tmp_path):
        """Test a missing file raises CatalogLoadError with the path."""
        missing = tmp_path / "missing.json"

        with pytest.raises(CatalogLoadError) as exc_info:
            load_catalog(missing)

        assert exc_info.value.path == str(missing.resolve())

    def test_invalid_json(self, tmp_path):
        """Test unparsable JSON raises CatalogLoadError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogLoadError, match="Could not read catalog"):
            load_catalog(path)

    def test_invalid_structure_records_path(self, tmp_path):
        """Test validation failures carry the file path."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"metadata": {"total_articles": -1}}), encoding="utf-8")

        with pytest.raises(CatalogLoadError) as exc_info:
            load_catalog(path)

        assert exc_info.value.path == str(path.resolve())
