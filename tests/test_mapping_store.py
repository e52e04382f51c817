"""Tests for mapping model and store operations."""

import pytest

from analytics_mapping.catalog import ColumnType
from analytics_mapping.mapping import (
    ColumnMapping,
    MappingCollection,
    MappingStore,
    from_records,
    get,
    remove,
    set_mapping,
)


def _collection(*pairs):
    """Build a collection of blob mappings from (column, name) pairs."""
    return MappingCollection(
        ColumnMapping(source_column=column, friendly_name=name, column_type=ColumnType.BLOB)
        for column, name in pairs
    )


def test_set_creates_mapping_with_schema_type(small_schema):
    """A new name appends a mapping typed by the schema."""
    result = set_mapping(MappingCollection(), small_schema, "double2", "Latency", "ms")

    mapping = get(result, "double2")
    assert mapping == ColumnMapping("double2", "Latency", ColumnType.DOUBLE, "ms")
    assert len(result) == 1


def test_set_appends_at_end(small_schema):
    start = _collection(("blob2", "Path"))
    result = set_mapping(start, small_schema, "blob1", "Country")

    assert result.columns() == ["blob2", "blob1"]


def test_set_unknown_column_is_noop(small_schema):
    """Unknown columns leave the collection unchanged."""
    start = _collection(("blob1", "Country"))
    result = set_mapping(start, small_schema, "blob99", "Nope")

    assert result is start
    assert result.get("blob99") is None


def test_set_twice_keeps_single_entry(small_schema):
    """Second set replaces the name; no duplicate entries."""
    result = set_mapping(MappingCollection(), small_schema, "blob1", "X")
    result = set_mapping(result, small_schema, "blob1", "Y")

    assert len(result) == 1
    assert result.get("blob1").friendly_name == "Y"


def test_update_keeps_position_and_type(small_schema):
    """Updates happen in place and replace the description."""
    start = MappingCollection(
        [
            ColumnMapping("blob1", "Country", ColumnType.BLOB, "ISO code"),
            ColumnMapping("blob2", "Path", ColumnType.BLOB),
            ColumnMapping("double1", "Bytes", ColumnType.DOUBLE),
        ]
    )
    result = set_mapping(start, small_schema, "blob2", "URL Path")

    assert result.columns() == ["blob1", "blob2", "double1"]
    assert result.get("blob2").column_type is ColumnType.BLOB
    assert result.get("blob2").friendly_name == "URL Path"
    assert result.get("blob1").description == "ISO code"

    described = set_mapping(result, small_schema, "blob1", "Country")
    assert described.get("blob1").description is None


@pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
def test_set_blank_name_removes(small_schema, blank):
    start = _collection(("blob1", "Country"), ("blob2", "Path"))
    result = set_mapping(start, small_schema, "blob1", blank)

    assert "blob1" not in result
    assert result.columns() == ["blob2"]


def test_set_blank_is_idempotent(small_schema):
    start = _collection(("blob1", "Country"), ("blob2", "Path"))
    once = set_mapping(start, small_schema, "blob1", "")
    twice = set_mapping(once, small_schema, "blob1", "")

    assert once == twice
    assert set_mapping(MappingCollection(), small_schema, "blob1", "") == MappingCollection()


def test_operations_do_not_mutate_input(small_schema):
    start = _collection(("blob1", "Country"))
    set_mapping(start, small_schema, "blob2", "Path")
    set_mapping(start, small_schema, "blob1", "Renamed")
    remove(start, "blob1")

    assert start.to_list() == [ColumnMapping("blob1", "Country", ColumnType.BLOB)]


def test_remove(small_schema):
    start = _collection(("blob1", "Country"), ("blob2", "Path"), ("blob3", "Agent"))

    assert remove(start, "blob2").columns() == ["blob1", "blob3"]
    assert remove(start, "blob9") is start


def test_store_facade(small_schema):
    store = MappingStore(small_schema)
    collection = store.set(MappingCollection(), "index1", "Customer")

    assert store.get(collection, "index1").column_type is ColumnType.INDEX
    assert len(store.remove(collection, "index1")) == 0


def test_collection_rejects_duplicates():
    with pytest.raises(ValueError):
        _collection(("blob1", "A"), ("blob1", "B"))


def test_records_round_trip(small_schema):
    collection = MappingCollection(
        [
            ColumnMapping("blob1", "Country", ColumnType.BLOB, "ISO code"),
            ColumnMapping("double1", "Bytes", ColumnType.DOUBLE),
        ]
    )
    records = collection.to_records()

    assert records[0] == {
        "source_column": "blob1",
        "friendly_name": "Country",
        "column_type": "blob",
        "description": "ISO code",
    }
    assert "description" not in records[1]
    assert from_records(records, small_schema) == collection


def test_from_records_checks_schema(small_schema):
    """Stored records go through set_mapping: schema types win, junk is dropped."""
    records = [
        {"source_column": "blob1", "friendly_name": "   ", "column_type": "double"},
        {"source_column": "blob99", "friendly_name": "Ghost", "column_type": "blob"},
        {"source_column": "blob2", "friendly_name": "Region", "column_type": "double"},
        {"source_column": "double1", "friendly_name": None},
    ]
    result = from_records(records, small_schema)

    assert result.columns() == ["blob2"]
    assert result.get("blob2").column_type is ColumnType.BLOB


def test_from_records_stringifies_numbers(small_schema):
    records = [
        {"source_column": "blob1", "friendly_name": 2024, "description": 1.5},
    ]
    mapping = from_records(records, small_schema).get("blob1")

    assert mapping.friendly_name == "2024"
    assert mapping.description == "1.5"


@pytest.mark.parametrize(
    "record",
    [
        {"source_column": "blob1", "friendly_name": True},
        {"source_column": "blob1", "friendly_name": "A", "description": ["x"]},
        {"source_column": 7, "friendly_name": "A"},
        "blob1",
    ],
)
def test_from_records_rejects_malformed(small_schema, record):
    with pytest.raises(ValueError):
        from_records([record], small_schema)
