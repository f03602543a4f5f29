import pytest

from chatplugins.vtb import SECOND_HEADER, THIRD_HEADER, VtbDB
from chatplugins.vtbquote import (
    EMPTY_CHOICE,
    EMPTY_QUOTE,
    RECORD_UA,
    TOO_MANY_ERRORS,
    WRONG_NUMBER,
    QuoteSession,
    download_record,
    escape_record_url,
    record_filename,
)

QUOTE_URL = "https://cdn.example.com/v/hi there.mp3"


class FakeResponse:
    def __init__(self, content):
        self.content = content


class FakeSession:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers))
        return FakeResponse(self.content)


@pytest.fixture
def db(tmp_path):
    with VtbDB(tmp_path / "vtb.db") as database:
        database.store_vtb_list([{"uid": "u1", "name": "Alice"}])
        database.store_vtb_page(
            "u1",
            {
                "data": {
                    "voices": [
                        {
                            "categoryName": "Greet",
                            "voiceList": [
                                {"name": "Hello", "path": QUOTE_URL},
                                {"name": "Silent", "path": ""},
                            ],
                        }
                    ]
                }
            },
        )
        yield database


def test_escape_record_url():
    assert escape_record_url(QUOTE_URL) == "https://cdn.example.com/v/hi%20there.mp3"


def test_escape_record_url_without_slash_is_unchanged():
    assert escape_record_url("noslash") == "noslash"


def test_record_filename():
    assert record_filename(1, 2, 3, "http://h.example.com/x.mp3") == "1-2-3.mp3"
    assert record_filename(1, 2, 3, "http://h.example.com/a.b/noext") == "1-2-3"


def test_download_record_writes_once(tmp_path):
    session = FakeSession(b"audio")
    target = tmp_path / "0-0-0.mp3"
    assert download_record(target, "http://h.example.com/a.mp3", session) == target
    assert target.read_bytes() == b"audio"
    assert session.calls[0][1]["User-Agent"] == RECORD_UA
    download_record(target, "http://h.example.com/a.mp3", session)
    assert len(session.calls) == 1


def test_full_selection(db):
    session = QuoteSession(db)
    assert "0. Alice" in session.start()
    assert session.answer("0") == [SECOND_HEADER + "0. Greet\n"]
    assert session.answer("0") == [THIRD_HEADER + "0. Hello\n1. Silent\n"]
    assert session.answer("0") == ["请欣赏《Hello》"]
    assert session.done
    assert session.choice.name == "Hello"
    assert session.record_url == escape_record_url(QUOTE_URL)
    assert session.record_name == "0-0-0.mp3"


def test_wrong_number_then_too_many(db):
    session = QuoteSession(db)
    for _ in range(3):
        assert session.answer("abc") == [WRONG_NUMBER]
    assert session.answer("0") == [TOO_MANY_ERRORS]
    assert session.done
    with pytest.raises(RuntimeError):
        session.answer("0")


def test_empty_first_choice_reprompts(db):
    session = QuoteSession(db)
    assert session.answer("9") == [EMPTY_CHOICE, session.start()]
    assert not session.done


def test_empty_second_choice_reprompts(db):
    session = QuoteSession(db)
    session.answer("0")
    assert session.answer("4") == [EMPTY_CHOICE, db.second_category_message(0)]


def test_empty_quote_goes_back_a_step(db):
    session = QuoteSession(db)
    session.answer("0")
    session.answer("0")
    assert session.answer("1") == [EMPTY_QUOTE, session.start()]
    assert not session.done
    assert session.answer("0") == [THIRD_HEADER + "0. Hello\n1. Silent\n"]