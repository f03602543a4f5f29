import random

import pytest

from chatplugins.vtb import (
    FIRST_HEADER,
    SECOND_HEADER,
    THIRD_HEADER,
    VTB_LIST_URL,
    VTB_PAGE_URL,
    VtbDB,
    decode_unicode_escapes,
    fetch_vtb_list,
    fetch_vtb_page,
)


class FakeResponse:
    def __init__(self, content):
        self.content = content
        self.status_code = 200

    def raise_for_status(self):
        pass


class FakeSession:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers))
        return FakeResponse(self.content)


PAGE = {
    "data": {
        "voices": [
            {
                "categoryName": "Greet",
                "author": "fan",
                "categoryDescription": {"zh-CN": "greetings"},
                "voiceList": [
                    {"name": "Hello", "path": "v/hello.mp3", "description": {"zh-CN": "hi"}},
                    {"name": "Bye", "path": "v/bye.mp3"},
                ],
            },
            {"categoryName": "Sing", "voiceList": [{"name": "Song", "path": "v/song.mp3"}]},
        ]
    }
}


@pytest.fixture
def db(tmp_path):
    with VtbDB(tmp_path / "vtb.db") as database:
        database.store_vtb_list([{"uid": "u1", "name": "Alice"}, {"uid": "u2", "name": "Bob"}])
        database.store_vtb_page("u1", PAGE)
        yield database


def test_decode_unicode_escapes_round_trip():
    assert decode_unicode_escapes("\\u0041bc") == "Abc"
    assert decode_unicode_escapes("plain text") == "plain text"


def test_decode_surrogate_pair():
    assert decode_unicode_escapes("\\ud83d\\udd2e") == "\U0001f52e"


def test_fetch_vtb_list_uses_url_and_decodes():
    session = FakeSession(br'[{"uid":"1","name":"\u4f60"}]')
    items = fetch_vtb_list(session)
    assert items == [{"uid": "1", "name": "\u4f60"}]
    assert session.calls[0][0] == VTB_LIST_URL
    assert "User-Agent" in session.calls[0][1]


def test_fetch_vtb_list_non_list_is_empty():
    assert fetch_vtb_list(FakeSession(b'{"a": 1}')) == []


def test_fetch_vtb_page_url():
    session = FakeSession(b'{"data": {"voices": []}}')
    assert fetch_vtb_page("u9", session) == {"data": {"voices": []}}
    assert session.calls[0][0] == VTB_PAGE_URL + "u9"


def test_first_category_message(db):
    assert db.first_category_message() == FIRST_HEADER + "0. Alice\n1. Bob\n"


def test_second_category_message(db):
    assert db.second_category_message(0) == SECOND_HEADER + "0. Greet\n1. Sing\n"
    assert db.second_category_message(1) == ""
    assert db.second_category_message(7) == ""


def test_third_category_message(db):
    assert db.third_category_message(0, 0) == THIRD_HEADER + "0. Hello\n1. Bye\n"
    assert db.third_category_message(0, 5) == ""


def test_third_category_lookup(db):
    tc = db.third_category(0, 0, 1)
    assert tc.name == "Bye"
    assert tc.path == "v/bye.mp3"
    assert tc.first_uid == "u1"
    assert db.third_category(0, 0, 9) is None
    hello = db.third_category(0, 0, 0)
    assert hello.description == "hi"


def test_store_vtb_list_updates_without_duplicates(db):
    uids = db.store_vtb_list([{"uid": "u2", "name": "Bobby"}, {"uid": "u1", "name": "Alice"}])
    assert uids == ["u2", "u1"]
    assert db.first_category_by_uid("u2").name == "Bobby"
    assert db.first_category_by_uid("u2").index == 0
    assert db.first_category_message().count("\n") == 3


def test_store_vtb_page_is_idempotent(db):
    db.store_vtb_page("u1", PAGE)
    assert db.third_category_message(0, 0) == THIRD_HEADER + "0. Hello\n1. Bye\n"


def test_first_category_by_uid_missing(db):
    assert db.first_category_by_uid("nobody") is None


def test_random_vtb(db):
    rng = random.Random(3)
    names = {db.random_vtb(rng).name for _ in range(30)}
    assert names <= {"Hello", "Bye", "Song"}
    assert names


def test_random_vtb_empty(tmp_path):
    with VtbDB(tmp_path / "empty.db") as empty:
        assert empty.random_vtb() is None
        assert empty.first_category_message() == FIRST_HEADER