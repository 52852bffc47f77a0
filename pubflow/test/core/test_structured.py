from __future__ import annotations

from datetime import UTC, datetime

from pubflow.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_datetime,
    get_int,
    get_str,
    get_str_list,
    get_table,
)


def test_as_str_dict_rejects_non_string_keys() -> None:
    assert as_str_dict({"a": 1}) == {"a": 1}
    assert as_str_dict({1: "a"}) is None
    assert as_str_dict([1]) is None


def test_as_obj_list() -> None:
    assert as_obj_list([1, "a"]) == [1, "a"]
    assert as_obj_list("a") is None


def test_get_str_strips_and_drops_empty() -> None:
    table = {"name": "  mygame ", "blank": "   ", "num": 3}
    assert get_str(table, "name") == "mygame"
    assert get_str(table, "blank") is None
    assert get_str(table, "num") is None
    assert get_str(table, "missing") is None


def test_get_int_rejects_bool() -> None:
    table = {"limit": 50, "flag": True}
    assert get_int(table, "limit") == 50
    assert get_int(table, "flag") is None


def test_get_bool() -> None:
    assert get_bool({"private": False}, "private") is False
    assert get_bool({"private": "no"}, "private") is None


def test_get_str_list() -> None:
    assert get_str_list({"cmd": ["make", "web"]}, "cmd") == ("make", "web")
    assert get_str_list({"cmd": ["make", 1]}, "cmd") is None
    assert get_str_list({}, "cmd") is None


def test_get_table() -> None:
    assert get_table({"build": {"command": []}}, "build") == {"command": []}
    assert get_table({"build": "x"}, "build") is None


def test_get_datetime_accepts_zulu_suffix() -> None:
    parsed = get_datetime({"updated_at": "2024-05-01T10:00:00Z"}, "updated_at")
    assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)


def test_get_datetime_invalid() -> None:
    assert get_datetime({"updated_at": "yesterday"}, "updated_at") is None
