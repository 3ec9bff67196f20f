"""Unit tests for raw message sources."""

from __future__ import annotations

import os

import pytest

from inbox_threads.exceptions import ConfigurationError, NotFoundError, SourceError
from inbox_threads.source import DirectorySource, MemorySource, parse_raw_message


def test_directory_source_walks_sorted_and_skips_git(tmp_path, make_raw) -> None:
    (tmp_path / "b").mkdir()
    (tmp_path / ".git").mkdir()
    (tmp_path / "b" / "2.eml").write_text(make_raw("two@x"))
    (tmp_path / "1.eml").write_text(make_raw("one@x"))
    (tmp_path / ".git" / "HEAD").write_text(make_raw("git@x"))
    (tmp_path / "noid.eml").write_text(make_raw(None))

    source = DirectorySource(tmp_path)
    ids = [raw.message_id for raw in source.all()]

    assert ids == ["one@x", "two@x"]
    assert source.one("two@x").location == str(tmp_path / "b" / "2.eml")


def test_directory_source_duplicates_first_wins(tmp_path, make_raw) -> None:
    (tmp_path / "a.eml").write_text(make_raw("dup@x", subject="first"))
    (tmp_path / "b.eml").write_text(make_raw("dup@x", subject="second"))

    source = DirectorySource(tmp_path)
    assert len(list(source.all())) == 1
    assert source.one("dup@x").message["Subject"] == "first"


def test_directory_source_unknown_id(tmp_path, make_raw) -> None:
    (tmp_path / "a.eml").write_text(make_raw("a@x"))
    source = DirectorySource(tmp_path)
    list(source.all())

    with pytest.raises(NotFoundError):
        source.one("b@x")


def test_directory_source_missing_root(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        DirectorySource(tmp_path / "missing")


def test_directory_source_read_error(tmp_path, make_raw) -> None:
    path = tmp_path / "a.eml"
    path.write_text(make_raw("a@x"))
    source = DirectorySource(tmp_path)
    list(source.all())
    os.remove(path)

    with pytest.raises(SourceError):
        source.one("a@x")


def test_memory_source(make_raw) -> None:
    source = MemorySource([make_raw("a@x"), make_raw("a@x"), make_raw(None)])

    assert len(source) == 1
    assert source.add(make_raw("b@x").encode()) == "b@x"
    assert [raw.message_id for raw in source.all()] == ["a@x", "b@x"]
    with pytest.raises(NotFoundError):
        source.one("c@x")


def test_body_text_decodes_transfer_encoding() -> None:
    raw = parse_raw_message(
        "Message-ID: <q@x>\n"
        "Content-Type: text/plain; charset=utf-8\n"
        "Content-Transfer-Encoding: quoted-printable\n"
        "\n"
        "caf=C3=A9\xa0ok\n".replace("\xa0", "=C2=A0"),
        "test",
    )

    assert raw.body_text() == "café ok\n"


def test_body_text_picks_first_plain_part() -> None:
    raw = parse_raw_message(
        "Message-ID: <mp@x>\n"
        "MIME-Version: 1.0\n"
        'Content-Type: multipart/alternative; boundary="XX"\n'
        "\n"
        "--XX\n"
        "Content-Type: text/html\n"
        "\n"
        "<p>html</p>\n"
        "--XX\n"
        "Content-Type: text/plain; charset=us-ascii\n"
        "\n"
        "plain text\n"
        "--XX--\n",
        "test",
    )

    assert raw.body_text().strip() == "plain text"


def test_body_text_without_text_part() -> None:
    raw = parse_raw_message("Message-ID: <h@x>\nContent-Type: text/html\n\n<p>x</p>\n", "test")

    assert raw.body_text() == ""
