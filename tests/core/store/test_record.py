"""Tests for Record field access, deltas and comparison."""

import pytest
from bson import ObjectId

from deltadoc.core.store import (
    ArgumentCountError,
    IdentifierImmutableError,
    Record,
)


@pytest.fixture
def record(posts):
    """A record wrapping a stored-looking document."""
    return Record({"_id": ObjectId("507f191e810c19729de860ea"), "title": "hi", "views": 3}, posts)


class TestFieldAccess:
    """Reading and writing document fields."""

    def test_indexed_read_returns_in_memory_value(self, record, posts_handle):
        assert record["title"] == "hi"
        assert record.get("missing") is None
        assert record.get("missing", "default") == "default"
        assert posts_handle.calls == [], "reads must not reach the store"

    def test_indexed_read_of_missing_key_raises_key_error(self, record):
        with pytest.raises(KeyError):
            record["missing"]

    def test_indexed_write_updates_document_and_records_set_delta(self, record):
        record["title"] = "bye"

        assert record["title"] == "bye"
        assert record.deltas == {"$set": {"title": "bye"}}

    def test_last_write_wins_within_set(self, record):
        record["title"] = "one"
        record["title"] = "two"

        assert record.deltas == {"$set": {"title": "two"}}

    def test_attribute_access_reads_and_writes_fields(self, record):
        assert record.title == "hi"

        record.title = "bye"

        assert record["title"] == "bye"
        assert record.deltas == {"$set": {"title": "bye"}}

    def test_attribute_access_to_id(self, record):
        assert record._id == ObjectId("507f191e810c19729de860ea")

    def test_attribute_read_of_missing_field_raises_attribute_error(self, record):
        with pytest.raises(AttributeError):
            record.missing
        assert not hasattr(record, "missing")

    def test_record_methods_shadow_fields_on_attribute_read(self, posts):
        record = Record({"_id": 1, "update": "field"}, posts)

        assert callable(record.update)
        assert record["update"] == "field"

    def test_contains(self, record):
        assert "title" in record
        assert "missing" not in record

    def test_set_is_chainable(self, record):
        assert record.set("a", 1).set("b", 2) is record
        assert record.deltas == {"$set": {"a": 1, "b": 2}}


class TestIdentifierImmutability:
    """`_id` cannot be rewritten through field writes."""

    def test_rewriting_assigned_id_raises(self, record):
        with pytest.raises(IdentifierImmutableError) as exc_info:
            record["_id"] = "other"

        assert exc_info.value.id == ObjectId("507f191e810c19729de860ea")
        assert record.deltas == {}

    def test_rewriting_id_through_attribute_raises(self, record):
        with pytest.raises(IdentifierImmutableError):
            record._id = "other"

    def test_id_can_be_set_while_absent(self, posts):
        record = Record({"title": "new"}, posts)

        record["_id"] = "custom"

        assert record["_id"] == "custom"

    def test_unsetting_assigned_id_raises(self, record):
        with pytest.raises(IdentifierImmutableError):
            record.unset("_id")

        assert record["_id"] == ObjectId("507f191e810c19729de860ea")
        assert record.deltas == {}

    def test_id_stays_fixed_after_failed_unset(self, record):
        with pytest.raises(IdentifierImmutableError):
            record.unset("_id")

        with pytest.raises(IdentifierImmutableError):
            record["_id"] = "other"


class TestAccess:
    """The arity-checked accessor."""

    def test_access_reads_with_no_argument(self, record):
        assert record.access("title") == "hi"

    def test_access_writes_with_one_argument(self, record):
        assert record.access("title=", "bye") == "bye"
        assert record["title"] == "bye"
        assert record.deltas == {"$set": {"title": "bye"}}

    @pytest.mark.parametrize(
        ("name", "args", "expected"),
        [
            ("title", ("extra",), 0),
            ("title", (1, 2), 0),
            ("title=", (), 1),
            ("title=", ("a", "b"), 1),
        ],
    )
    def test_access_with_wrong_argument_count_raises(self, record, name, args, expected):
        with pytest.raises(ArgumentCountError) as exc_info:
            record.access(name, *args)

        error = exc_info.value
        assert error.name == name
        assert error.expected == expected
        assert error.given == len(args)
        assert isinstance(error, TypeError)


class TestDeltas:
    """Explicit delta recording."""

    def test_delta_merges_fields_under_operator(self, record):
        record.delta("$inc", total=3, unique=1)
        record.delta("$inc", {"total": 5})

        assert record.deltas == {"$inc": {"total": 5, "unique": 1}}

    def test_delta_is_chainable_and_keeps_operators_verbatim(self, record):
        result = record.delta("$push", tags="python").delta("customOp", {"x": 1})

        assert result is record
        assert record.deltas == {"$push": {"tags": "python"}, "customOp": {"x": 1}}

    def test_delta_does_not_touch_document(self, record):
        record.delta("$inc", views=1)

        assert record["views"] == 3

    def test_empty_delta_records_nothing(self, record):
        record.delta("$set")
        record.delta("$set", {})

        assert record.deltas == {}

    def test_field_write_and_explicit_set_share_bucket(self, record):
        record["title"] = "from write"
        record.delta("$set", title="from delta", other=1)

        assert record.deltas == {"$set": {"title": "from delta", "other": 1}}

    def test_unset_removes_field_and_records_unset(self, record):
        assert record.unset("views") is record

        assert "views" not in record
        assert record.deltas == {"$unset": {"views": 1}}

    def test_unset_missing_field_still_records_delta(self, record):
        record.unset("missing")

        assert record.deltas == {"$unset": {"missing": 1}}

    def test_deltas_property_is_a_copy(self, record):
        record["title"] = "bye"

        record.deltas["$set"]["title"] = "tampered"

        assert record.deltas == {"$set": {"title": "bye"}}


class TestToDict:
    """Document export."""

    def test_to_dict_returns_copy(self, posts):
        record = Record({"_id": 1, "nested": {"a": 1}}, posts)

        exported = record.to_dict()
        exported["nested"]["a"] = 2

        assert exported == {"_id": 1, "nested": {"a": 2}}
        assert record["nested"] == {"a": 1}


class TestComparison:
    """Equality, ordering and hashing by `_id`."""

    def test_records_with_same_id_are_equal(self, posts):
        assert Record({"_id": 1, "a": 1}, posts) == Record({"_id": 1, "a": 2}, posts)

    def test_records_with_different_ids_differ(self, posts):
        assert Record({"_id": 1}, posts) != Record({"_id": 2}, posts)

    def test_records_of_different_types_differ(self, posts):
        class SpecialRecord(Record):
            pass

        assert Record({"_id": 1}, posts) != SpecialRecord({"_id": 1}, posts)

    def test_record_is_not_equal_to_plain_dict(self, posts):
        assert Record({"_id": 1}, posts) != {"_id": 1}

    def test_ordering_uses_string_form_of_id(self, posts):
        # "10" < "9" as strings
        ten = Record({"_id": 10}, posts)
        nine = Record({"_id": 9}, posts)

        assert ten < nine
        assert nine > ten
        assert sorted([nine, ten]) == [ten, nine]
        assert ten <= Record({"_id": 10}, posts)
        assert nine >= ten

    def test_hash_is_consistent_with_equality(self, posts):
        first = Record({"_id": "abc"}, posts)
        second = Record({"_id": "abc", "x": 1}, posts)

        assert len({first, second}) == 1

    def test_hash_follows_raw_id_equality(self, posts):
        as_int = Record({"_id": 1}, posts)
        as_float = Record({"_id": 1.0}, posts)

        assert as_int == as_float
        assert hash(as_int) == hash(as_float)
        assert len({as_int, as_float}) == 1

    def test_unhashable_id_still_hashes(self, posts):
        first = Record({"_id": {"a": 1, "b": 2}}, posts)
        second = Record({"_id": {"b": 2, "a": 1}}, posts)

        assert first == second
        assert hash(first) == hash(second)

    def test_repr_lists_collection_and_deltas(self, record):
        record["title"] = "bye"

        text = repr(record)

        assert text.startswith("<Record posts")
        assert "'$set': {'title': 'bye'}" in text
