"""Tests for Record update, delete and the deprecated save."""

import pytest

from deltadoc.core.store import MissingIdentifierError, Record, StaleRecordError


@pytest.fixture
def stored(posts):
    """A record inserted through the collection."""
    return posts.insert({"title": "hi", "views": 3})


class TestUpdate:
    """Flushing deltas as one partial update."""

    def test_update_sends_accumulated_deltas_keyed_by_id(self, stored, posts_handle):
        stored["title"] = "bye"
        stored.delta("$inc", views=2)

        result = stored.update()

        assert posts_handle.calls_to("update_one") == [
            ("update_one", {"_id": stored["_id"]}, {"$set": {"title": "bye"}, "$inc": {"views": 2}})
        ]
        assert result.modified_count == 1
        assert posts_handle.documents[0]["title"] == "bye"
        assert posts_handle.documents[0]["views"] == 5

    def test_update_clears_deltas_and_marks_stale(self, stored):
        stored["title"] = "bye"

        stored.update()

        assert stored.deltas == {}
        assert stored.stale

    def test_update_without_deltas_is_noop(self, stored, posts_handle):
        assert stored.update() is None
        assert stored.update({}) is None

        assert posts_handle.calls_to("update_one") == []
        assert not stored.stale

    def test_second_update_without_changes_does_not_hit_store(self, stored, posts_handle):
        stored["title"] = "bye"
        stored.update()

        assert stored.update() is None

        assert len(posts_handle.calls_to("update_one")) == 1

    def test_extra_deltas_are_merged_and_win_per_field(self, stored, posts_handle):
        stored["title"] = "pending"
        stored["body"] = "kept"

        stored.update({"$set": {"title": "extra"}, "$inc": {"views": 1}})

        _, _, sent = posts_handle.calls_to("update_one")[0]
        assert sent == {"$set": {"title": "extra", "body": "kept"}, "$inc": {"views": 1}}

    def test_extra_deltas_alone_are_sent(self, stored, posts_handle):
        stored.update({"$unset": {"views": 1}})

        _, _, sent = posts_handle.calls_to("update_one")[0]
        assert sent == {"$unset": {"views": 1}}
        assert "views" not in posts_handle.documents[0]

    def test_empty_extra_operator_buckets_are_dropped(self, stored, posts_handle):
        assert stored.update({"$set": {}}) is None

        stored["title"] = "bye"
        stored.update({"$inc": {}})

        _, _, sent = posts_handle.calls_to("update_one")[0]
        assert sent == {"$set": {"title": "bye"}}

    def test_extra_deltas_do_not_leak_into_accumulator(self, stored):
        stored.update({"$set": {"title": "extra"}})

        assert stored.deltas == {}

    def test_update_without_id_raises_and_keeps_deltas(self, posts, posts_handle):
        record = Record({"title": "orphan"}, posts)
        record["title"] = "still orphan"

        with pytest.raises(MissingIdentifierError) as exc_info:
            record.update()

        assert exc_info.value.operation == "update"
        assert exc_info.value.collection == "posts"
        assert record.deltas == {"$set": {"title": "still orphan"}}
        assert not record.stale
        assert posts_handle.calls_to("update_one") == []

    def test_update_without_id_and_without_deltas_is_noop(self, posts):
        assert Record({"title": "orphan"}, posts).update() is None

    def test_mutation_after_update_is_allowed(self, stored, posts_handle):
        stored["title"] = "first"
        stored.update()

        stored["title"] = "second"
        stored.update()

        assert len(posts_handle.calls_to("update_one")) == 2
        assert posts_handle.documents[0]["title"] == "second"
        assert stored.stale

    def test_last_call_wins_across_writes_and_deltas(self, stored, posts_handle):
        stored["title"] = "a"
        stored.delta("$set", title="b")
        stored.set("title", "c")
        stored.delta("$inc", views=1).delta("$inc", views=4)

        stored.update()

        _, _, sent = posts_handle.calls_to("update_one")[0]
        assert sent == {"$set": {"title": "c"}, "$inc": {"views": 4}}


class TestDelete:
    """Removing a record from the store."""

    def test_delete_removes_document_by_id(self, stored, posts_handle):
        result = stored.delete()

        assert result.deleted_count == 1
        assert posts_handle.calls_to("delete_one") == [("delete_one", {"_id": stored["_id"]})]
        assert posts_handle.documents == []

    def test_delete_without_id_raises(self, posts):
        with pytest.raises(MissingIdentifierError) as exc_info:
            Record({"title": "orphan"}, posts).delete()

        assert exc_info.value.operation == "delete"


class TestDeprecatedSave:
    """Full-document overwrite kept for backward compatibility."""

    def test_save_before_update_overwrites_document(self, stored, posts_handle):
        stored.unset("views")

        with pytest.warns(DeprecationWarning, match="deprecated"):
            stored.save()

        assert posts_handle.calls_to("replace_one") == [
            ("replace_one", {"_id": stored["_id"]}, {"_id": stored["_id"], "title": "hi"})
        ]
        assert posts_handle.documents[0] == {"_id": stored["_id"], "title": "hi"}

    def test_save_after_update_raises_stale(self, stored, posts_handle):
        stored["title"] = "bye"
        stored.update()

        with pytest.warns(DeprecationWarning):
            with pytest.raises(StaleRecordError) as exc_info:
                stored.save()

        assert exc_info.value.id == stored["_id"]
        assert posts_handle.calls_to("replace_one") == []

    def test_save_after_update_with_override_succeeds(self, stored, posts_handle):
        stored["title"] = "bye"
        stored.update()

        with pytest.warns(DeprecationWarning):
            stored.save(ignore_stale=True)

        assert len(posts_handle.calls_to("replace_one")) == 1

    def test_save_without_id_inserts_and_folds_id(self, posts, posts_handle):
        record = Record({"title": "new"}, posts)

        with pytest.warns(DeprecationWarning):
            result = record.save()

        assert record["_id"] == result.inserted_id
        assert posts_handle.documents == [{"_id": result.inserted_id, "title": "new"}]
