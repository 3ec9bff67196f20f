"""Unit tests for the reply graph index."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from inbox_threads.exceptions import CycleDetectedError, NotFoundError
from inbox_threads.index import ThreadIndex
from inbox_threads.models import Address, MessageHeader

DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _header(message_id: str, reply_to: str = "", minutes: int = 0, title: str = "") -> MessageHeader:
    return MessageHeader(
        id=message_id,
        reply_to=reply_to,
        title=title or message_id,
        author=Address(name="Alice", address="alice@example.com"),
        date=DATE + timedelta(minutes=minutes),
    )


def test_builds_parent_and_children() -> None:
    index = ThreadIndex([_header("a"), _header("b", "a", 1), _header("c", "b", 2)])

    assert index.node("a").parent is None
    assert index.node("b").parent == "a"
    assert index.node("a").children == ("b",)
    assert index.node("b").children == ("c",)
    assert index.header("c").id == "c"
    assert len(index) == 3


def test_children_sorted_oldest_first() -> None:
    index = ThreadIndex([_header("a"), _header("late", "a", 10), _header("early", "a", 5)])

    assert index.node("a").children == ("early", "late")


def test_equal_dates_keep_input_order() -> None:
    index = ThreadIndex([_header("a"), _header("x", "a", 1), _header("y", "a", 1)])

    assert index.node("a").children == ("x", "y")


def test_dangling_reply_is_a_root() -> None:
    index = ThreadIndex([_header("a"), _header("orphan", "missing", 5)])

    assert index.node("orphan").parent is None
    assert [h.id for h in index.roots()] == ["orphan", "a"]


def test_roots_newest_first_and_limited() -> None:
    headers = [_header(f"m{i}", minutes=i) for i in range(25)]
    index = ThreadIndex(headers)

    roots = index.roots(20)
    assert len(roots) == 20
    assert roots[0].id == "m24"
    assert [h.date for h in roots] == sorted((h.date for h in roots), reverse=True)
    assert len(index.roots()) == 25


def test_empty_ids_are_not_indexed() -> None:
    index = ThreadIndex([_header(""), _header("a")])

    assert len(index) == 1
    assert "" not in index


def test_duplicate_ids_first_wins() -> None:
    index = ThreadIndex([_header("a", title="first"), _header("a", title="second")])

    assert len(index) == 1
    assert index.header("a").title == "first"


def test_thread_head_walks_to_root() -> None:
    index = ThreadIndex([_header("a"), _header("b", "a", 1), _header("c", "b", 2)])

    assert index.thread_head("c").id == "a"
    assert index.thread_head("a").id == "a"


def test_thread_head_unknown_id() -> None:
    index = ThreadIndex([_header("a")])

    with pytest.raises(NotFoundError):
        index.thread_head("nope")


def test_thread_head_detects_cycles() -> None:
    index = ThreadIndex([_header("a", "b"), _header("b", "a", 1), _header("self", "self")])

    assert index.roots() == []
    with pytest.raises(CycleDetectedError):
        index.thread_head("a")
    with pytest.raises(CycleDetectedError):
        index.thread_head("self")
    with pytest.raises(CycleDetectedError):
        list(index.descendants("a"))


def test_descendants_preorder() -> None:
    index = ThreadIndex(
        [
            _header("a"),
            _header("b", "a", 1),
            _header("c", "a", 2),
            _header("d", "b", 3),
        ]
    )

    assert [n.id for n in index.descendants("a")] == ["a", "b", "d", "c"]
