"""Unit tests for Dao document operations (query shape via RecordingConnector)."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest

from arango_plugin.aql import PageResult, aql, bind
from arango_plugin.dao import WRITE_PROTECTED_ATTRIBUTES, Dao
from arango_plugin.kernel.errors import ExecutionError, NotFoundError, UniquenessViolationError, ValidationError
from arango_plugin.testing.fakes import RecordingConnector

HIDDEN = ["_rev", "_key", "_status", "password"]
NOW = "2026-01-01 12:00:00"


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


@pytest.fixture
def dao(make_dao: Callable[..., Dao]) -> Dao:
    return make_dao("user")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestGetOne:
    def test_query_shape(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1", "name": "bob"}])

        result = _run(dao.get_one({"_id": "user/1"}))

        assert result == {"_id": "user/1", "name": "bob"}
        q = recording_connector.last
        assert "FOR t IN user" in q.query
        assert "FILTER t._id == @value0 AND t._status == true" in q.query
        assert "RETURN UNSET(t, @value1)" in q.query
        assert "FOR rt IN list RETURN rt" in q.query
        assert q.bind_vars == {"value0": "user/1", "value1": HIDDEN}

    def test_missing_is_none(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([])
        assert _run(dao.get_one({"_id": "user/404"})) is None

    def test_more_than_one_row(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}, {"_id": "user/1"}])
        with pytest.raises(UniquenessViolationError):
            _run(dao.get_one({"_id": "user/1"}))

    def test_invalid_params_issue_no_query(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        with pytest.raises(ValidationError):
            _run(dao.get_one({"_id": ""}))
        assert recording_connector.executed == []

    def test_keep_attributes(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        _run(dao.get_one({"_id": "user/1", "options": {"keepAttributes": "name,password"}}))
        q = recording_connector.last
        assert "RETURN KEEP(t, @value1)" in q.query
        assert q.bind_vars["value1"] == ["name"]

    def test_descriptor_extras_are_hidden(self, make_dao: Callable[..., Dao],
                                          recording_connector: RecordingConnector) -> None:
        _run(make_dao("user", excluded_attributes=("salt",)).get_one({"_id": "user/1"}))
        assert recording_connector.last.bind_vars["value1"] == [*HIDDEN, "salt"]

    def test_code_conversion_uses_descriptor_collections(
        self, make_dao: Callable[..., Dao], recording_connector: RecordingConnector
    ) -> None:
        dao = make_dao("user", static_data_collection="codes")
        _run(dao.get_one({"_id": "user/1", "options": {"convertStaticCodes": True}}))
        assert "FOR sd IN codes" in recording_connector.last.query

    def test_legacy_get(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}])
        assert _run(dao.get("user/1")) == {"_id": "user/1"}


class TestGetOneByFilter:
    def test_newest_match(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/2"}])

        result = _run(dao.get_one_by_filter({"filter": {"email": "a@b.c"}}))

        assert result == {"_id": "user/2"}
        q = recording_connector.last
        assert "FILTER t._status == true AND t.email == @value0" in q.query
        assert "SORT t._create_date DESC" in q.query
        assert "LIMIT 1" in q.query

    def test_filter_required(self, dao: Dao) -> None:
        with pytest.raises(ValidationError):
            _run(dao.get_one_by_filter({"filter": {}}))

    def test_legacy_get_by_filter(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        assert _run(dao.get_by_filter({"email": "a@b.c"})) is None
        assert recording_connector.last.bind_vars["value0"] == "a@b.c"


class TestListReads:
    def test_gets_by_ids(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}, {"_id": "user/2"}])

        rows = _run(dao.gets({"_ids": ["user/1", "user/2"], "sorts": [{"field": "name"}]}))

        assert rows == [{"_id": "user/1"}, {"_id": "user/2"}]
        q = recording_connector.last
        assert "AND t._id IN @value0" in q.query
        assert "SORT t.name" in q.query
        assert q.bind_vars["value0"] == ["user/1", "user/2"]

    def test_gets_requires_ids(self, dao: Dao) -> None:
        with pytest.raises(ValidationError):
            _run(dao.gets({"_ids": []}))

    def test_gets_by_filter_defaults_to_id_sort(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        _run(dao.gets_by_filter({}))
        q = recording_connector.last
        assert "FILTER t._status == true\n" in q.query
        assert "SORT t._id" in q.query

    def test_gets_by_filter_with_like(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        _run(dao.gets_by_filter({
            "like": {"or": [{"field": "name", "search": "%bo%"}, {"field": "nick", "search": "%bo%"}]},
            "sorts": [{"field": "age", "direction": "desc"}],
        }))
        q = recording_connector.last
        assert "FILTER LIKE(t.name, @value0) OR LIKE(t.nick, @value1)" in q.query
        assert "SORT t.age DESC" in q.query

    def test_array_contains_needs_descriptor_opt_in(
        self, make_dao: Callable[..., Dao], recording_connector: RecordingConnector
    ) -> None:
        params = {"filter": {"tags": {"opr": "POSITION", "value": ["a"]}}}
        with pytest.raises(ValidationError):
            _run(make_dao("user").gets_by_filter(params))
        _run(make_dao("user", allow_array_contains=True).gets_by_filter(params))
        assert "FILTER (@value0 IN t.tags)" in recording_connector.last.query

    def test_empty_array_contains_list(
        self, make_dao: Callable[..., Dao], recording_connector: RecordingConnector
    ) -> None:
        _run(make_dao("user", allow_array_contains=True).gets_by_filter(
            {"filter": {"tags": {"opr": "POSITION", "value": []}}}
        ))
        assert "FILTER ()" not in recording_connector.last.query
        assert "FILTER t._status == true\n" in recording_connector.last.query


class TestGetPage:
    def test_page_of_five(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"total_count": 5, "items": [{"_id": "user/1"}, {"_id": "user/2"}]}])

        page = _run(dao.get_page({"pageNumber": 1, "pageSize": 2}))

        assert isinstance(page, PageResult)
        assert page.total_count == 5
        assert page.has_more is True
        assert page.end == 2
        assert len(page.items) == 2

    def test_single_round_trip_query(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"total_count": 5, "items": []}])

        _run(dao.get_page({"pageNumber": 3, "pageSize": 2, "filter": {"role": "dev"}}))

        assert len(recording_connector.executed) == 1
        q = recording_connector.last
        assert q.query.startswith("LET ts = (")
        assert "AND t.role == @value0" in q.query
        assert "LIMIT @value2, @value3" in q.query
        assert "total_count: LENGTH(ts)" in q.query
        assert q.bind_vars["value2"] == 4
        assert q.bind_vars["value3"] == 2

    def test_last_page(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"total_count": 5, "items": [{"_id": "user/5"}]}])
        page = _run(dao.get_page({"pageNumber": 3, "pageSize": 2}))
        assert page.has_more is False
        assert page.end == 5

    def test_invalid_page_size(self, dao: Dao) -> None:
        with pytest.raises(ValidationError):
            _run(dao.get_page({"pageNumber": 1, "pageSize": 0}))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


class TestSave:
    def test_insert_strips_protected_and_stamps_audit(
        self, dao: Dao, recording_connector: RecordingConnector
    ) -> None:
        recording_connector.queue([{"_id": "user/1"}])
        doc = {"name": "bob", "_key": "forced", "_status": False}

        assert _run(dao.save(doc)) == {"_id": "user/1"}

        q = recording_connector.last
        assert "INSERT MERGE(UNSET(@value0, @value1), { _create_date: @value2, _status: true })" in q.query
        assert "INTO user" in q.query
        assert q.bind_vars == {"value0": doc, "value1": list(WRITE_PROTECTED_ATTRIBUTES), "value2": NOW}

    @pytest.mark.parametrize("doc", [{}, {"name": ""}, {"name": None}])
    def test_rejects_empty_documents(self, dao: Dao, doc: dict) -> None:
        with pytest.raises(ValidationError):
            _run(dao.save(doc))

    def test_save_many(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_ids": ["user/1", "user/2"]}])

        result = _run(dao.save_many([{"name": "a"}, {"name": "b"}]))

        assert result == {"_ids": ["user/1", "user/2"]}
        q = recording_connector.last
        assert "FOR d IN @value0" in q.query
        assert "RETURN { _ids: ids }" in q.query

    def test_save_many_requires_documents(self, dao: Dao) -> None:
        with pytest.raises(ValidationError):
            _run(dao.save_many([]))


class TestUpdate:
    def test_update(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}])

        assert _run(dao.update({"_id": "user/1", "newObj": {"name": "x"}})) == {"_id": "user/1"}

        q = recording_connector.last
        assert "FILTER t._id == @value0 AND t._status == true" in q.query
        assert "UPDATE t WITH MERGE(UNSET(@value1, @value2), { _update_date: @value3 })" in q.query
        assert "OPTIONS { keepNull: true }" in q.query
        assert q.bind_vars["value3"] == NOW

    def test_keep_null_false(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}])
        _run(dao.update({"_id": "user/1", "newObj": {"nick": None}, "keepNull": False}))
        assert "OPTIONS { keepNull: false }" in recording_connector.last.query

    def test_inactive_or_missing_record(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([])
        with pytest.raises(NotFoundError) as exc_info:
            _run(dao.update({"_id": "user/9", "newObj": {"name": "x"}}))
        assert exc_info.value.identifier == "user/9"

    def test_update_many(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_ids": ["user/1"]}])

        result = _run(dao.update_many({"_ids": ["user/1", "user/2"], "newObj": {"role": "dev"}}))

        assert result == {"_ids": ["user/1"]}
        q = recording_connector.last
        assert "FOR id IN @value0" in q.query
        assert "FILTER t._id == id AND t._status == true" in q.query

    def test_update_many_nothing_touched(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_ids": []}])
        with pytest.raises(NotFoundError):
            _run(dao.update_many({"_ids": ["user/1"], "newObj": {"role": "dev"}}))

    def test_update_each(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_ids": ["user/1", "user/2"]}])

        _run(dao.update_each([
            {"_id": "user/1", "newObj": {"rank": 1}},
            {"_id": "user/2", "new_obj": {"rank": 2}},
        ]))

        q = recording_connector.last
        assert "UNSET(it.newObj, @value1)" in q.query
        assert q.bind_vars["value0"] == [
            {"_id": "user/1", "newObj": {"rank": 1}},
            {"_id": "user/2", "newObj": {"rank": 2}},
        ]


class TestDelete:
    def test_soft_delete(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}])

        assert _run(dao.soft_delete("user/1")) == {"_id": "user/1"}

        q = recording_connector.last
        assert "LET key = PARSE_IDENTIFIER(@value0).key" in q.query
        assert "UPDATE key WITH { _status: false, _update_date: @value1 } IN user" in q.query
        assert "_status == true" not in q.query

    def test_soft_delete_twice(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}], [{"_id": "user/1"}])
        assert _run(dao.soft_delete("user/1")) == _run(dao.soft_delete("user/1"))

    def test_hard_delete(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_id": "user/1"}])
        assert _run(dao.hard_delete("user/1")) == {"_id": "user/1"}
        q = recording_connector.last
        assert "REMOVE key IN user" in q.query
        assert "RETURN { _id: OLD._id }" in q.query

    def test_soft_delete_many(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([{"_ids": ["user/1", "user/2"]}])
        assert _run(dao.soft_delete_many(["user/1", "user/2"])) == {"_ids": ["user/1", "user/2"]}
        assert "LET key = PARSE_IDENTIFIER(id).key" in recording_connector.last.query

    def test_delete_requires_id(self, dao: Dao) -> None:
        with pytest.raises(ValidationError):
            _run(dao.soft_delete(""))
        with pytest.raises(ValidationError):
            _run(dao.soft_delete_many([]))


# ---------------------------------------------------------------------------
# Failures and the escape hatch
# ---------------------------------------------------------------------------


class TestExecution:
    def test_engine_failure(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue(RuntimeError("document not found"))
        with pytest.raises(ExecutionError) as exc_info:
            _run(dao.soft_delete("user/404"))
        assert exc_info.value.operation == "user.soft_delete"

    def test_custom_query(self, dao: Dao, recording_connector: RecordingConnector) -> None:
        recording_connector.queue([3])
        rows = _run(dao.query(aql("RETURN LENGTH(user) + $n", n=bind(0)), operation="count"))
        assert rows == [3]
        assert recording_connector.last.query == "RETURN LENGTH(user) + @value0"
