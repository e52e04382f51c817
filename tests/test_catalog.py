"""Tests for the dataset catalog."""

import pytest

from analytics_mapping.catalog import Catalog


def test_list_datasets_is_cached(recording_datasource):
    catalog = Catalog(recording_datasource)

    assert catalog.list_datasets() == ["web_events", "api_calls"]
    recording_datasource.datasets["new_one"] = []
    assert "new_one" not in catalog.list_datasets()
    assert "new_one" in catalog.list_datasets(refresh=True)


def test_get_dataset_loads_columns_once(recording_datasource):
    catalog = Catalog(recording_datasource)
    dataset = catalog.get_dataset("web_events")

    assert dataset.column_names() == ["timestamp", "blob1", "double1"]
    assert dataset.get_column("double1").data_type == "Float64"
    assert dataset.get_column("blob2") is None

    catalog.get_dataset("web_events")
    assert recording_datasource.metadata_requests == ["web_events"]


def test_register_datasource_invalidates(recording_datasource):
    catalog = Catalog(recording_datasource)
    catalog.get_dataset("web_events")
    catalog.register_datasource(recording_datasource)

    assert catalog.datasets == {}


def test_catalog_without_datasource():
    with pytest.raises(RuntimeError):
        Catalog().list_datasets()
